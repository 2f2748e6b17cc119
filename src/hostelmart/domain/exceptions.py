"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the web and CLI layers can catch them uniformly and translate them into
a status code or a user-friendly message.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input was malformed or a business rule was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AuthenticationError(DomainException):
    """The admin password did not match."""


class ConflictError(DomainException):
    """The request is valid but conflicts with the current order state."""


class AlreadyCancelledError(ConflictError):
    """The order was cancelled earlier and cannot change again."""


class CancelWindowExpiredError(ConflictError):
    """The customer tried to cancel after the cancel window closed."""


class OrderIdMismatchError(ConflictError):
    """The confirmation id echoed by the customer does not match."""
