"""Error taxonomy for queue and review operations."""

from __future__ import annotations


class WantokError(Exception):
    """Base class for errors raised by core operations."""


class StaleReference(WantokError):  # noqa: N818
    """Raised when an operation targets a document that no longer exists."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')


class LockContention(WantokError):  # noqa: N818
    """Raised when another user holds a valid lock on the sentence."""

    def __init__(self, sentence_id: int, locked_by: str | None) -> None:
        self.sentence_id = sentence_id
        self.locked_by = locked_by
        super().__init__(f"Sentence {sentence_id} is being translated by another user")


class ConcurrencyConflict(WantokError):  # noqa: N818
    """Raised when an optimistic write keeps losing to concurrent writers."""


class InvalidInput(WantokError):  # noqa: N818
    """Raised for user input rejected before any write happens."""


class MissingFeedback(InvalidInput):
    """Raised when a reject or flag action has no feedback comment."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Feedback is required to mark a translation as {action}")


class InvalidTransition(WantokError):  # noqa: N818
    """Raised when a document is not in a state that allows the operation."""
