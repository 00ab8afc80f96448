# scripts/aggregate.py

import logging
from dataclasses import asdict, dataclass, fields
from typing import Callable, Hashable, Iterable, List, Optional

import pandas as pd

from .errors import EmptyInputError
from .polarity_analysis import ScoredToken, SentimentClass, sentiment_label
from .text_prep import Token

logger = logging.getLogger(__name__)

MISSING_OMIT = "omit"
MISSING_ZERO = "zero"
MISSING_POLICIES = (MISSING_OMIT, MISSING_ZERO)


@dataclass(frozen=True)
class GroupScore:
    group_key: Hashable
    positive: int
    negative: int
    raw_score: int
    offset: float
    offset_score: float
    rank: int
    scored_tokens: int = 0

    @property
    def has_scores(self) -> bool:
        """False for groups reported only because of the 'zero' missing-group policy."""
        return self.scored_tokens > 0


def _default_key(token: Token) -> Hashable:
    return token.group_key


def aggregate(
    scored: Iterable[ScoredToken],
    key_of: Optional[Callable[[Token], Hashable]] = None,
    missing: str = MISSING_OMIT,
    groups: Optional[Iterable[Hashable]] = None,
) -> List[GroupScore]:
    """
    Rolls scored tokens up into one GroupScore per group, best first.

    - raw_score    = positive - negative
    - offset       = mean raw_score over the groups of THIS call
    - offset_score = raw_score - offset
    Ties on raw_score keep the groups' original order (first appearance, or
    the order of `groups` under the 'zero' policy), so reruns rank identically.

    With missing='zero', every key in `groups` is reported even when none of
    its tokens scored; with missing='omit' (default) such groups are left out.
    """
    if missing not in MISSING_POLICIES:
        raise ValueError(f"Unknown missing-group policy {missing!r}; expected one of {MISSING_POLICIES}")

    key_of = key_of or _default_key
    scored = list(scored)
    if not scored:
        raise EmptyInputError("No scored tokens to aggregate; the offset would be undefined.")

    # key -> [positive, negative, scored_tokens]; dict keeps first-seen order
    counts = {}
    if missing == MISSING_ZERO and groups is not None:
        for key in groups:
            counts.setdefault(key, [0, 0, 0])

    for item in scored:
        row = counts.setdefault(key_of(item.token), [0, 0, 0])
        label = sentiment_label(item.sentiment)
        if label == SentimentClass.POSITIVE.value:
            row[0] += 1
        elif label == SentimentClass.NEGATIVE.value:
            row[1] += 1
        row[2] += 1

    keys = list(counts)
    frame = pd.DataFrame(
        [counts[key] for key in keys],
        columns=["positive", "negative", "scored_tokens"],
    )
    frame["order"] = range(len(keys))
    frame["raw_score"] = frame["positive"] - frame["negative"]

    offset = float(frame["raw_score"].mean())
    frame["offset_score"] = frame["raw_score"] - offset

    # mergesort is stable; "order" makes the tie-break explicit anyway
    ranked = frame.sort_values(["raw_score", "order"], ascending=[False, True], kind="mergesort")

    logger.debug("Aggregated %d scored tokens into %d groups (offset=%.4f)", len(scored), len(keys), offset)

    return [
        GroupScore(
            group_key=keys[int(row.order)],
            positive=int(row.positive),
            negative=int(row.negative),
            raw_score=int(row.raw_score),
            offset=offset,
            offset_score=float(row.offset_score),
            rank=rank,
            scored_tokens=int(row.scored_tokens),
        )
        for rank, row in enumerate(ranked.itertuples(index=False), start=1)
    ]


def scores_to_frame(scores: Iterable[GroupScore]) -> pd.DataFrame:
    """One row per group, columns in GroupScore field order, ready for to_csv()."""
    columns = [f.name for f in fields(GroupScore)]
    return pd.DataFrame([asdict(score) for score in scores], columns=columns)
