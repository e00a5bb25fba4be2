from __future__ import annotations

from typing import Iterable, List


class ConfigurationError(ValueError):
    """Raised when simulation parameters fall outside their declared ranges."""

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "invalid configuration")


class InvalidStateTransition(RuntimeError):
    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"cannot {action} a run in state {state}")
