"""
Identifier case folding.

Database identifiers are compared case-insensitively in most dialects, so
differs that correlate tables and columns across snapshots take a
``CaseNormalizer`` instead of comparing raw strings.
"""

from __future__ import annotations

from enum import StrEnum


class CaseStrategy(StrEnum):
    """How identifiers are folded before comparison"""

    LOWER = "lower"
    UPPER = "upper"
    PRESERVE = "preserve"

    def normalize(self, value: str | None) -> str:
        """Trim and fold ``value``; ``None`` becomes an empty string"""
        if value is None:
            return ""
        trimmed = value.strip()
        if self is CaseStrategy.LOWER:
            return trimmed.lower()
        if self is CaseStrategy.UPPER:
            return trimmed.upper()
        return trimmed


class CaseNormalizer:
    """Pure string folding function bound to one ``CaseStrategy``"""

    __slots__ = ("strategy",)

    def __init__(self, strategy: CaseStrategy = CaseStrategy.LOWER) -> None:
        self.strategy = CaseStrategy(strategy)

    @classmethod
    def lower(cls) -> CaseNormalizer:
        return cls(CaseStrategy.LOWER)

    @classmethod
    def upper(cls) -> CaseNormalizer:
        return cls(CaseStrategy.UPPER)

    @classmethod
    def preserve(cls) -> CaseNormalizer:
        return cls(CaseStrategy.PRESERVE)

    def __call__(self, value: str | None) -> str:
        return self.strategy.normalize(value)

    def normalize(self, value: str | None) -> str:
        return self.strategy.normalize(value)

    def fold(self, value: str | None) -> str | None:
        """Null-preserving variant of ``normalize`` for optional attributes"""
        if value is None:
            return None
        return self.strategy.normalize(value)

    def __repr__(self) -> str:
        return f"CaseNormalizer({self.strategy.value!r})"
