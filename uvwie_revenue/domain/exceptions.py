"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Missing, malformed or unrecognized input to a calculation"""

    pass


class NotFoundError(DomainException):
    """Referenced shop, payment or permit does not exist"""

    pass


class DependencyFailureError(DomainException):
    """Data store or other collaborator failed while serving a read or write"""

    pass
