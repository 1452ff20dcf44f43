from __future__ import annotations


class ShakeError(Exception):
    """Base class for fatal errors raised while shaking a directory."""


class ConfigurationError(ShakeError):
    pass


class ExclusionPatternError(ShakeError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid exclusion pattern {pattern!r}: {reason}")
        self.pattern = pattern
