class CatalogError(Exception):
    """Base class for catalog failures that map onto a client-facing status."""


class NotFoundError(CatalogError):
    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class PermissionDeniedError(CatalogError):
    """The caller does not own the channel it is trying to change."""
