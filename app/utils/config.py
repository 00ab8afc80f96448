import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


def _flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in ("1", "true", "yes")


class Config:
    # Finnhub key for the market-news collaborator
    API_KEY = os.getenv("FINNHUB_API_KEY", "YOUR_FINNHUB_API_KEY")

    # "omit" leaves out groups with no scored tokens, "zero" reports them as 0/0
    MISSING_GROUPS = os.getenv("SENTIMENT_MISSING_GROUPS", "omit").strip().lower()

    # Optional word,sentiment CSV; the VADER lexicon is used when unset
    LEXICON_PATH = os.getenv("SENTIMENT_LEXICON_PATH") or None
    STOPWORDS_PATH = os.getenv("SENTIMENT_STOPWORDS_PATH") or None

    OUTPUT_DIR = Path(os.getenv("SENTIMENT_OUTPUT_DIR", str(BASE_DIR / "data" / "processed")))

    # Nothing is written to disk unless explicitly allowed
    ALLOW_WRITE = _flag("SENTIMENT_ALLOW_WRITE")
