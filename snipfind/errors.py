from __future__ import annotations


class SnipfindError(Exception):
    """Base class for failures surfaced to the user. `exit_code` is the process status."""

    exit_code = 1


class UsageError(SnipfindError):
    exit_code = 1


class PatternError(SnipfindError):
    exit_code = 2

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid content pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class NotFound(SnipfindError):
    # Reported to the user, but the session still ends cleanly.
    exit_code = 0

    def __init__(self, key: str) -> None:
        super().__init__(f"no snippet found for {key!r}")
        self.key = key


class Cancelled(SnipfindError):
    exit_code = 0

    def __init__(self) -> None:
        super().__init__("selection cancelled")
