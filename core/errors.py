"""Error taxonomy shared by the persistence layer and the state machine."""

from __future__ import annotations


class StateError(Exception):
    """Base class for onboarding state failures."""


class MissingState(StateError):
    """Nothing has been persisted yet – start from the initial state."""


class CorruptState(StateError):
    """Persisted data exists but cannot be decoded."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class InvalidTransition(StateError):
    """An action was dispatched in a view that does not accept it."""

    def __init__(self, action: str, view: str) -> None:
        super().__init__(f"{action} is not allowed in view {view!r}")
        self.action = action
        self.view = view
