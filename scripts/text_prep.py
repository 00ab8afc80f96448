# scripts/text_prep.py

import re
from dataclasses import dataclass, field
from typing import Any, Hashable, List, Mapping, Optional


# Printable ASCII plus the usual whitespace; everything else becomes UNKNOWN_CHAR
PRINTABLE_CHARS = frozenset(chr(c) for c in range(0x20, 0x7F)) | {"\t", "\n", "\r"}
UNKNOWN_CHAR = "?"

MENTION_PLACEHOLDER = "@user"
URL_PLACEHOLDER = "httplink"

MENTION_RE = re.compile(r"(?<!\S)@\S+")
URL_RE = re.compile(r"(?<!\S)http\S*")

# Fixed, ASCII-only word definition so tokenization never depends on locale
TOKEN_RE = re.compile(r"[@#]?[a-z0-9]+(?:'[a-z0-9]+)*", re.ASCII | re.IGNORECASE)


@dataclass(frozen=True)
class SourceRecord:
    """One unit of raw text (a tweet, a book chapter...) plus its grouping key."""
    text: str
    group_key: Hashable
    metadata: Optional[Mapping[str, Any]] = field(default=None, compare=False)


@dataclass(frozen=True)
class Token:
    word: str
    group_key: Hashable
    record_index: int = 0
    position: int = 0


def make_record(text, group_key, **metadata) -> SourceRecord:
    """Convenience constructor used by the collaborators in get_data."""
    return SourceRecord(text=text, group_key=group_key, metadata=metadata or None)


def normalize(text: str) -> str:
    """
    Cleans raw text before tokenizing.
    - unrepresentable characters -> '?' (one per character)
    - lower-cased
    - runs starting with @ -> '@user', runs starting with http -> 'httplink'
    Running it on its own output is a no-op.
    """
    # Replace before lower-casing: some non-ASCII letters lower-case to two chars
    cleaned = "".join(ch if ch in PRINTABLE_CHARS else UNKNOWN_CHAR for ch in text)
    cleaned = cleaned.lower()
    cleaned = MENTION_RE.sub(MENTION_PLACEHOLDER, cleaned)
    return URL_RE.sub(URL_PLACEHOLDER, cleaned)


def tokenize(record: SourceRecord, record_index: int = 0) -> List[Token]:
    """Splits a record's text into word tokens, left to right."""
    return [
        Token(word=match.group(0).lower(), group_key=record.group_key,
              record_index=record_index, position=position)
        for position, match in enumerate(TOKEN_RE.finditer(record.text))
    ]
