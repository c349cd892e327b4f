"""Domain errors raised by the chore core and service layer."""

from datetime import datetime


class HomeHelperError(Exception):
    """Base class for all domain errors."""

    pass


class NotFoundError(HomeHelperError):
    """Raised when a task, completion log or user id does not exist."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class InvalidStateError(HomeHelperError):
    """Raised when an entity would violate a domain invariant."""

    pass


class StaleUndoError(HomeHelperError):
    """Raised when an undo is requested after the undo window closed."""

    def __init__(self, log_id: str, undo_until: datetime):
        super().__init__(f"Undo window for {log_id} closed at {undo_until.isoformat()}")
        self.log_id = log_id
        self.undo_until = undo_until
