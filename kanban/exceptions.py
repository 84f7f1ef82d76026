class NotFoundError(Exception):
    """Raised when an entity id has no matching row."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


class InvalidPositionError(ValueError):
    pass


class ConflictError(Exception):
    pass
