from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class ConfigurationGap:
    """A recoverable hole in configuration: missing multiplier, templates, exclusion set."""

    kind: str
    subject: str
    detail: str = ""

    def describe(self) -> str:
        text = f"{self.kind} missing for {self.subject}"
        return f"{text}: {self.detail}" if self.detail else text


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    gap: Optional[ConfigurationGap] = None

    @property
    def ok(self) -> bool:
        return self.gap is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def defaulted(cls, value: T, gap: ConfigurationGap) -> "Outcome[T]":
        return cls(value=value, gap=gap)

    @classmethod
    def skipped(cls, gap: ConfigurationGap) -> "Outcome[T]":
        return cls(value=None, gap=gap)

    def value_or(self, default: T) -> T:
        return default if self.value is None else self.value
