"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidProjectionInputError(DomainException):
    """Projection input violates its contract (e.g. a return below -100%)"""

    pass
