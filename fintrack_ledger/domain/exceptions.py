"""Domain-specific exceptions"""

from fintrack_ledger.domain.models import ErrorKind


class DomainException(Exception):
    """Base exception for domain layer"""

    kind: ErrorKind = ErrorKind.BUSINESS_RULE


class ValidationError(DomainException):
    """Required field missing or out of range"""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainException):
    """Entity does not exist or is not owned by the caller"""

    kind = ErrorKind.NOT_FOUND


class BusinessRuleError(DomainException):
    """Operation is well-formed but not allowed in the current state"""

    kind = ErrorKind.BUSINESS_RULE


class UnauthenticatedError(DomainException):
    """No authenticated user; aborts the operation before any logic runs"""

    pass
