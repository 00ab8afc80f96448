# scripts/get_data.py
"""
Collaborators that turn raw sources into SourceRecords, and CSV helpers.
Nothing here does any scoring.
"""
import logging
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import finnhub
import pandas as pd

from app.utils.config import Config

from .text_prep import SourceRecord, make_record

logger = logging.getLogger(__name__)

# Matches "Chapter 3", "CHAPTER XII", "chapter 10." at the start of a line
CHAPTER_RE = r"^\s*chapter\s+([0-9]+|[ivxlcdm]+)\b"

# --- Finnhub Client Initialization ---
if Config.API_KEY and Config.API_KEY != 'YOUR_FINNHUB_API_KEY':
    finnhub_client = finnhub.Client(api_key=Config.API_KEY)
else:
    # Keep client as None if key is missing/placeholder
    finnhub_client = None
    logger.info("Finnhub API key is missing or a placeholder; market news disabled.")


def get_market_news(category='general'):
    """
    Fetches market news from Finnhub.
    Returns: list of article dicts, or None if the client is unavailable or the call fails.
    """
    if not finnhub_client:
        logger.error("Finnhub client is not available for market news.")
        return None
    logger.info("Fetching news for category: %s", category)
    try:
        return finnhub_client.general_news(category, min_id=0)
    except Exception as e:
        logger.error("An error occurred while fetching news: %s", e)
        return None


def records_from_articles(articles: Iterable[Mapping], key_field: str = 'category') -> List[SourceRecord]:
    """
    One record per article: 'headline summary' is the text, article[key_field]
    the group key, every other field goes to metadata.
    """
    records = []
    for article in articles or []:
        text = f"{article.get('headline', '')} {article.get('summary', '')}".strip()
        metadata = {k: v for k, v in article.items() if k not in ('headline', 'summary', key_field)}
        records.append(make_record(text, article.get(key_field), **metadata))
    return records


def records_from_frame(df: pd.DataFrame, text_column: str, key_columns: Union[str, Sequence[str]]) -> List[SourceRecord]:
    """
    One record per row. Several key columns give tuple keys, e.g.
    ('iphone', 'trump') for a device x topic breakdown.
    """
    if isinstance(key_columns, str):
        key_columns = [key_columns]
    key_columns = list(key_columns)

    missing = [c for c in [text_column, *key_columns] if c not in df.columns]
    if missing:
        raise KeyError(f"Column(s) not found: {', '.join(missing)}")

    meta_columns = [c for c in df.columns if c != text_column and c not in key_columns]
    records = []
    for row in df.to_dict(orient='records'):
        text = row[text_column]
        if len(key_columns) == 1:
            key = row[key_columns[0]]
        else:
            key = tuple(row[c] for c in key_columns)
        # NaN from pandas means "absent" for the pipeline's record checks;
        # a composite key with any absent part is absent as a whole
        text = None if pd.isna(text) else text
        parts = key if isinstance(key, tuple) else (key,)
        if any(pd.isna(part) for part in parts):
            key = None
        records.append(SourceRecord(text=text, group_key=key,
                                    metadata={c: row[c] for c in meta_columns} or None))
    return records


ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000}


def _chapter_number(label: str) -> Optional[int]:
    """'12' -> 12, 'XIV' -> 14, anything else -> None"""
    if label.isdigit():
        return int(label)
    if not label or any(ch not in ROMAN_VALUES for ch in label.lower()):
        return None
    values = [ROMAN_VALUES[ch] for ch in label.lower()]
    # subtractive notation: a smaller numeral before a larger one counts negative
    return sum(-v if i + 1 < len(values) and v < values[i + 1] else v for i, v in enumerate(values))


def records_from_pages(pages: Iterable[str], chapter_pattern: str = CHAPTER_RE) -> List[SourceRecord]:
    """
    Groups already-extracted book pages into one record per chapter heading.
    The key is the number written in the heading ('Chapter 0', 'CHAPTER XII'),
    so repeated headings share a group; patterns without a capture group fall
    back to the heading's ordinal. Text before the first heading is dropped
    (title pages, contents).
    """
    heading = re.compile(chapter_pattern, re.IGNORECASE | re.MULTILINE)
    full_text = "\n".join(pages)

    matches = list(heading.finditer(full_text))
    records = []
    for ordinal, match in enumerate(matches, start=1):
        end = matches[ordinal].start() if ordinal < len(matches) else len(full_text)
        body = full_text[match.end():end].strip()
        label = match.group(1) if heading.groups else None
        key = _chapter_number(label) if label else None
        if key is None:
            key = ordinal
        records.append(make_record(body, key, heading=match.group(0).strip()))
    return records


def save_data_to_csv(data: pd.DataFrame, filename: str, directory="data") -> Optional[Path]:
    """ Saves a pandas DataFrame to a CSV file. Returns the written path. """
    if data is None or data.empty:
        logger.warning("Cannot save empty data.")
        return None
    save_path = Path(directory)
    save_path.mkdir(parents=True, exist_ok=True)
    full_path = save_path / filename

    data.to_csv(full_path, index=False)
    logger.info("Data successfully saved to %s", full_path)
    return full_path


def get_latest_csv_path(directory: Path, pattern: str = "*.csv") -> Optional[Path]:
    """ Finds the most recently modified CSV file matching a pattern in a directory. """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Directory not found at %s", directory)
        return None

    list_of_files = sorted(directory.glob(pattern), key=lambda x: x.stat().st_mtime, reverse=True)
    if list_of_files:
        return list_of_files[0]
    logger.warning("No files matching '%s' found in %s", pattern, directory)
    return None
