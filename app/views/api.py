"""
JSON endpoints for scoring records by group
"""
import logging

from flask import Blueprint, current_app, jsonify, request

from scripts.aggregate import MISSING_POLICIES
from scripts.errors import EmptyInputError, InvalidLexiconError
from scripts.GroupSentimentScorer import GroupSentimentScorer
from scripts.polarity_analysis import lexicon_from_mapping
from scripts.text_prep import SourceRecord

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)


def _error(message, status=400):
    return jsonify({"error": message}), status


def _to_record(item):
    """Dict payload -> SourceRecord; anything else is passed through and skipped later."""
    if not isinstance(item, dict):
        return item
    key = item.get("group_key")
    # JSON has no tuples; composite keys arrive as lists
    if isinstance(key, list):
        key = tuple(key)
    return SourceRecord(text=item.get("text"), group_key=key, metadata=item.get("metadata"))


def _score_to_json(score):
    return {
        "group_key": score.group_key,
        "positive": score.positive,
        "negative": score.negative,
        "raw_score": score.raw_score,
        "offset": score.offset,
        "offset_score": score.offset_score,
        "rank": score.rank,
        "scored_tokens": score.scored_tokens,
        "has_scores": score.has_scores,
    }


@api_bp.route('/health')
def health():
    return jsonify({"status": "ok"})


@api_bp.route('/score', methods=['POST'])
def score_records():
    """
    Body: {"records": [{"text", "group_key", "metadata"}, ...],
           "lexicon": {word: class}?, "stopwords": [...]?, "missing": "omit"|"zero"?}
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get("records"), list):
        return _error("Body must be a JSON object with a 'records' list.")

    missing = payload.get("missing")
    if missing is not None and missing not in MISSING_POLICIES:
        return _error(f"'missing' must be one of {list(MISSING_POLICIES)}.")

    stopwords = payload.get("stopwords")
    if stopwords is None:
        stopwords = []
    if not isinstance(stopwords, list) or not all(isinstance(w, str) for w in stopwords):
        return _error("'stopwords' must be a list of strings.")

    try:
        if payload.get("lexicon") is not None:
            scorer = GroupSentimentScorer(
                lexicon_from_mapping(payload["lexicon"]),
                stopwords,
                missing=missing,
            )
        else:
            factory = current_app.config.get("SCORER_FACTORY", GroupSentimentScorer.from_config)
            scorer = factory(missing)
            scorer.stopwords |= {w.lower() for w in stopwords}
    except InvalidLexiconError as e:
        return _error(str(e))
    except ValueError as e:
        # e.g. SENTIMENT_MISSING_GROUPS set to an unknown policy
        logger.error("Scorer could not be built: %s", e)
        return _error(str(e))

    try:
        result = scorer.run(_to_record(item) for item in payload["records"])
    except EmptyInputError as e:
        return _error(str(e), 422)

    return jsonify({
        "scores": [_score_to_json(s) for s in result.scores],
        "skipped": [s.to_dict() for s in result.skipped],
    })
