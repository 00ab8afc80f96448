"""
Errors and diagnostics raised by the group sentiment pipeline.
"""
from dataclasses import dataclass
from typing import Any


class EmptyInputError(ValueError):
    """No records, or no scored tokens, so the run-wide offset is undefined."""


class InvalidLexiconError(ValueError):
    """Lexicon is missing one of the sentiment classes the aggregator needs."""


@dataclass(frozen=True)
class SkippedRecord:
    """A single input record that was left out of the run, and why."""
    index: int
    reason: str
    record: Any = None

    def to_dict(self):
        return {"index": self.index, "reason": self.reason}
