"""Domain exceptions."""


class InvalidInputError(ValueError):
    """Raised when a cut, sheet or inventory record is malformed."""


class PackingInvariantError(RuntimeError):
    """Raised when a packer's internal free-space state becomes inconsistent."""
