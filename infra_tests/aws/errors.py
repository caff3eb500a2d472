"""Errors raised by resource lookups."""


class ResourceNotFoundError(LookupError):
    """The resource a test expected to find does not exist."""

    def __init__(self, resource_type: str, identifier: str, detail: str = ""):
        self.resource_type = resource_type
        self.identifier = identifier
        message = f"{resource_type} {identifier} not found"
        if detail:
            message += f": {detail}"
        super().__init__(message)
