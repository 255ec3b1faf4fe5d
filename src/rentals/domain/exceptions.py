"""Domain-level exceptions.

Business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly
messages.  The availability engine itself never lets these escape its
public operations; it converts them into result values instead.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class StorageError(DomainException):
    """The reservation or product store could not be read or written."""
