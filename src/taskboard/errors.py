"""Exceptions raised by task board operations."""


class BoardError(ValueError):
    """Base class for all task board errors."""


class NotFoundError(BoardError):
    """An operation referenced an entity id that is not in the store."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")


class InvalidReferenceError(BoardError):
    """A create or reorder referenced a parent that does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")


class ValidationError(BoardError):
    """Malformed input: empty name, bad date, negative order and the like."""


class SnapshotError(BoardError):
    """A board snapshot could not be read, written or trusted."""
