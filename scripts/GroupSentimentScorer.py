import logging
import math
from dataclasses import dataclass, field, replace
from typing import Callable, Hashable, Iterable, List, Mapping, Optional, Set

from app.utils.config import Config

from .aggregate import MISSING_POLICIES, MISSING_ZERO, GroupScore, aggregate
from .errors import EmptyInputError, SkippedRecord
from .polarity_analysis import (
    ScoredToken,
    Sentiment,
    load_lexicon,
    load_stopwords,
    score,
    validate_lexicon,
    vader_lexicon,
)
from .text_prep import SourceRecord, Token, normalize, tokenize

logger = logging.getLogger(__name__)


@dataclass
class ScoringResult:
    scores: List[GroupScore]
    skipped: List[SkippedRecord] = field(default_factory=list)
    scored: List[ScoredToken] = field(default_factory=list)


def _is_absent(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _check_record(record) -> Optional[str]:
    """Returns why a record can't be used, or None if it is fine."""
    if not isinstance(record, SourceRecord):
        return f"not a SourceRecord ({type(record).__name__})"
    if not isinstance(record.text, str) or not record.text.strip():
        return "missing text"
    parts = record.group_key if isinstance(record.group_key, tuple) else (record.group_key,)
    if any(_is_absent(part) for part in parts):
        return "missing group key"
    try:
        hash(record.group_key)
    except TypeError:
        return f"unhashable group key ({type(record.group_key).__name__})"
    return None


class GroupSentimentScorer:
    """
    Runs records through normalize -> tokenize -> score -> aggregate and
    returns one GroupScore per group.

    The lexicon is checked up front, so a bad lexicon fails before any
    record is touched. Bad records are skipped and reported, not fatal.

    key_of may only read a token's group_key and record_index. Under the
    'zero' policy it is also called once per record, on a Token that carries
    just those two fields, to list the groups to report.
    """

    def __init__(
        self,
        lexicon: Mapping[str, Sentiment],
        stopwords: Optional[Iterable[str]] = None,
        missing: Optional[str] = None,
        key_of: Optional[Callable[[Token], Hashable]] = None,
    ):
        validate_lexicon(lexicon)
        self.lexicon = lexicon
        self.stopwords: Set[str] = {w.lower() for w in (stopwords or ())}
        self.missing = missing or Config.MISSING_GROUPS
        if self.missing not in MISSING_POLICIES:
            raise ValueError(f"Unknown missing-group policy {self.missing!r}; expected one of {MISSING_POLICIES}")
        self.key_of = key_of

    @classmethod
    def from_config(cls, missing: Optional[str] = None, key_of=None) -> "GroupSentimentScorer":
        """Builds a scorer from the lexicon/stop-word files named in Config (VADER lexicon if none)."""
        if Config.LEXICON_PATH:
            lexicon = load_lexicon(Config.LEXICON_PATH)
        else:
            lexicon = vader_lexicon()
        stopwords = load_stopwords(Config.STOPWORDS_PATH) if Config.STOPWORDS_PATH else set()
        return cls(lexicon, stopwords, missing=missing, key_of=key_of)

    def run(self, records: Iterable[SourceRecord]) -> ScoringResult:
        records = list(records)
        if not records:
            raise EmptyInputError("No source records supplied.")

        skipped: List[SkippedRecord] = []
        scored: List[ScoredToken] = []
        group_keys = []

        for index, record in enumerate(records):
            reason = _check_record(record)
            if reason:
                logger.warning("Skipping record %d: %s", index, reason)
                skipped.append(SkippedRecord(index=index, reason=reason, record=record))
                continue

            clean = replace(record, text=normalize(record.text))
            scored.extend(score(tokenize(clean, record_index=index), self.stopwords, self.lexicon))
            if self.key_of is None:
                group_keys.append(record.group_key)
            else:
                # word/position are blank here; see the key_of note on the class
                group_keys.append(self.key_of(Token(word="", group_key=record.group_key, record_index=index)))

        if not scored:
            raise EmptyInputError(
                f"No tokens matched the lexicon across {len(records) - len(skipped)} usable record(s)."
            )

        groups = group_keys if self.missing == MISSING_ZERO else None
        scores = aggregate(scored, key_of=self.key_of, missing=self.missing, groups=groups)

        logger.info("Scored %d groups from %d records (%d skipped)", len(scores), len(records), len(skipped))
        return ScoringResult(scores=scores, skipped=skipped, scored=scored)
