# scripts/score_groups.py
"""
Batch entry point: score the rows of a CSV by group and print the ranking.

    python -m scripts.score_groups tweets.csv --text-column text \
        --key-column device --key-column topic --stopwords stop_words.txt --save
"""
import argparse
import logging
import sys
from datetime import datetime

import pandas as pd

from app.utils.config import Config

from .aggregate import MISSING_POLICIES, scores_to_frame
from .errors import EmptyInputError, InvalidLexiconError
from .get_data import records_from_frame, save_data_to_csv
from .GroupSentimentScorer import GroupSentimentScorer
from .polarity_analysis import load_lexicon, load_stopwords, vader_lexicon


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lexicon-based sentiment scores per group.")
    parser.add_argument("input", help="CSV file with one text record per row")
    parser.add_argument("--text-column", default="text")
    parser.add_argument("--key-column", action="append", dest="key_columns",
                        help="grouping column; repeat for composite keys")
    lexicon = parser.add_mutually_exclusive_group()
    lexicon.add_argument("--lexicon", default=Config.LEXICON_PATH, help="word,sentiment CSV")
    lexicon.add_argument("--vader", action="store_true", help="use the VADER lexicon")
    parser.add_argument("--stopwords", default=Config.STOPWORDS_PATH, help="one stop word per line")
    parser.add_argument("--missing", choices=MISSING_POLICIES, default=Config.MISSING_GROUPS)
    parser.add_argument("--save", action="store_true", help=f"write the scores under {Config.OUTPUT_DIR}")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    key_columns = args.key_columns or ["group"]

    lexicon = load_lexicon(args.lexicon) if args.lexicon and not args.vader else vader_lexicon()
    stopwords = load_stopwords(args.stopwords) if args.stopwords else set()

    df = pd.read_csv(args.input)
    print(f"Loaded {len(df)} rows from {args.input}")

    try:
        scorer = GroupSentimentScorer(lexicon, stopwords, missing=args.missing)
        result = scorer.run(records_from_frame(df, args.text_column, key_columns))
    except (EmptyInputError, InvalidLexiconError) as e:
        print(f"❌ {e}")
        return 1

    for skipped in result.skipped:
        print(f"⚠️ Skipped row {skipped.index}: {skipped.reason}")

    frame = scores_to_frame(result.scores)
    print(frame.to_string(index=False))

    if args.save or Config.ALLOW_WRITE:
        out_name = f"group_scores_{datetime.now():%Y%m%d_%H%M%S}.csv"
        path = save_data_to_csv(frame, out_name, Config.OUTPUT_DIR)
        print(f"✅ Saved scores → {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
