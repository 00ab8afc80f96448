import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Set, Union

import pandas as pd
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from .errors import InvalidLexiconError
from .text_prep import Token

logger = logging.getLogger(__name__)


class SentimentClass(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    OTHER = "other"


REQUIRED_CLASSES = (SentimentClass.POSITIVE, SentimentClass.NEGATIVE)

# Lexicons may carry classes beyond the enum (e.g. NRC's "joy", "fear")
Sentiment = Union[SentimentClass, str]


@dataclass(frozen=True)
class ScoredToken:
    token: Token
    sentiment: Sentiment

    @property
    def word(self) -> str:
        return self.token.word

    @property
    def group_key(self):
        return self.token.group_key


def sentiment_label(value) -> str:
    """Plain lower-case label for a class, whether it is an enum member or a string."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).strip().lower()


def _as_class(value) -> Sentiment:
    label = sentiment_label(value)
    try:
        return SentimentClass(label)
    except ValueError:
        return label


def validate_lexicon(lexicon: Mapping[str, Sentiment]) -> None:
    """
    Raises InvalidLexiconError unless the lexicon has at least one positive
    and one negative entry.
    """
    if not isinstance(lexicon, Mapping):
        raise InvalidLexiconError(f"Lexicon must be a mapping, got {type(lexicon).__name__}")

    present = {sentiment_label(value) for value in lexicon.values()}
    missing = [cls.value for cls in REQUIRED_CLASSES if cls.value not in present]
    if missing:
        raise InvalidLexiconError(f"Lexicon has no entries for: {', '.join(missing)}")


def score(tokens: Iterable[Token], stopwords: Set[str], lexicon: Mapping[str, Sentiment]) -> List[ScoredToken]:
    """
    Drops stop words, then joins each token against the lexicon.
    Tokens the lexicon does not know are dropped, never defaulted to neutral.
    """
    scored = []
    for token in tokens:
        word = token.word.lower()
        if word in stopwords:
            continue
        sentiment = lexicon.get(word)
        if sentiment is None:
            continue
        scored.append(ScoredToken(token=token, sentiment=sentiment))
    return scored


def load_lexicon(path: Union[str, Path]) -> Dict[str, Sentiment]:
    """
    Reads a word -> sentiment lexicon from a CSV (or .tsv) file with
    'word' and 'sentiment' columns, e.g. a tidytext get_sentiments() export.
    """
    path = Path(path)
    sep = "\t" if path.suffix.lower() == ".tsv" else ","
    df = pd.read_csv(path, sep=sep, dtype=str)

    missing_cols = {"word", "sentiment"} - set(df.columns)
    if missing_cols:
        raise InvalidLexiconError(f"{path} is missing column(s): {', '.join(sorted(missing_cols))}")

    df = df.dropna(subset=["word", "sentiment"])
    df["word"] = df["word"].str.strip().str.lower()
    # NRC-style lexicons list a word once per class; keep the first
    df = df.drop_duplicates(subset="word", keep="first")

    lexicon = {word: _as_class(label) for word, label in zip(df["word"], df["sentiment"])}
    logger.info("Loaded %d lexicon entries from %s", len(lexicon), path)
    return lexicon


def lexicon_from_mapping(mapping: Mapping[str, str]) -> Dict[str, Sentiment]:
    """Lower-cases words and resolves labels, e.g. for a lexicon sent as JSON."""
    if not isinstance(mapping, Mapping):
        raise InvalidLexiconError(f"Lexicon must be a mapping, got {type(mapping).__name__}")
    return {str(word).strip().lower(): _as_class(label) for word, label in mapping.items()}


def vader_lexicon(threshold: float = 0.0) -> Dict[str, SentimentClass]:
    """
    Builds a class lexicon from VADER's valence lexicon.
    - valence >  threshold -> positive
    - valence < -threshold -> negative
    - otherwise            -> neutral
    """
    analyzer = SentimentIntensityAnalyzer()
    lexicon = {}
    for word, valence in analyzer.lexicon.items():
        if valence > threshold:
            lexicon[word.lower()] = SentimentClass.POSITIVE
        elif valence < -threshold:
            lexicon[word.lower()] = SentimentClass.NEGATIVE
        else:
            lexicon[word.lower()] = SentimentClass.NEUTRAL
    return lexicon


def load_stopwords(path: Union[str, Path]) -> Set[str]:
    """One word per line; blank lines and '#' comments are ignored."""
    words = set()
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            word = line.split("#", 1)[0].strip().lower()
            if word:
                words.add(word)
    return words
