import pytest

from app.utils.config import Config
from scripts.errors import EmptyInputError, InvalidLexiconError
from scripts.GroupSentimentScorer import GroupSentimentScorer
from scripts.polarity_analysis import SentimentClass
from scripts.text_prep import SourceRecord


def test_scenario_end_to_end(lexicon, stopwords, scenario_records):
    result = GroupSentimentScorer(lexicon, stopwords, missing="omit").run(scenario_records)

    assert [(s.group_key, s.positive, s.negative, s.raw_score) for s in result.scores] == [
        ("A", 1, 0, 1),
        ("B", 0, 1, -1),
    ]
    assert result.scores[0].offset == 0.0
    assert [s.offset_score for s in result.scores] == [1.0, -1.0]
    assert result.skipped == []
    assert not any(s.word in stopwords for s in result.scored)


def test_invalid_lexicon_fails_before_any_record():
    with pytest.raises(InvalidLexiconError):
        GroupSentimentScorer({"good": SentimentClass.POSITIVE}, set())


def test_unknown_missing_policy_fails_fast(lexicon):
    with pytest.raises(ValueError):
        GroupSentimentScorer(lexicon, set(), missing="sometimes")


def test_malformed_records_are_skipped_not_fatal(lexicon):
    records = [
        SourceRecord(text="good times", group_key="A"),
        SourceRecord(text=None, group_key="B"),
        SourceRecord(text="bad", group_key=None),
        "just a string",
        SourceRecord(text="   ", group_key="C"),
        SourceRecord(text="awful", group_key="D"),
    ]
    result = GroupSentimentScorer(lexicon, set(), missing="omit").run(records)

    assert [(s.index, s.reason) for s in result.skipped] == [
        (1, "missing text"),
        (2, "missing group key"),
        (3, "not a SourceRecord (str)"),
        (4, "missing text"),
    ]
    assert [s.group_key for s in result.scores] == ["A", "D"]


def test_no_records_raises(lexicon):
    with pytest.raises(EmptyInputError):
        GroupSentimentScorer(lexicon, set()).run([])


def test_no_lexicon_hits_raises(lexicon):
    records = [SourceRecord(text="nothing to see here", group_key="A")]
    with pytest.raises(EmptyInputError):
        GroupSentimentScorer(lexicon, set()).run(records)


def test_mentions_and_urls_never_reach_the_lexicon(lexicon):
    records = [SourceRecord(text="@good http://bad.example/awful", group_key="A")]
    with pytest.raises(EmptyInputError):
        GroupSentimentScorer(lexicon, set()).run(records)


def test_text_is_normalized_before_lookup(lexicon):
    result = GroupSentimentScorer(lexicon, set(), missing="omit").run(
        [SourceRecord(text="GOOD! Great!! 😀", group_key="A")]
    )
    assert result.scores[0].positive == 2


def test_stopwords_are_matched_case_insensitively(lexicon):
    result = GroupSentimentScorer(lexicon, {"GOOD"}, missing="omit").run(
        [SourceRecord(text="good bad", group_key="A")]
    )
    assert [s.word for s in result.scored] == ["bad"]


def test_zero_policy_reports_records_without_hits(lexicon):
    records = [
        SourceRecord(text="nothing here", group_key="quiet"),
        SourceRecord(text="good good", group_key="loud"),
    ]
    result = GroupSentimentScorer(lexicon, set(), missing="zero").run(records)

    assert [(s.group_key, s.raw_score, s.has_scores) for s in result.scores] == [
        ("loud", 2, True),
        ("quiet", 0, False),
    ]
    assert result.scores[0].offset == 1.0


def test_missing_policy_defaults_to_config(lexicon, monkeypatch):
    monkeypatch.setattr(Config, "MISSING_GROUPS", "zero")
    scorer = GroupSentimentScorer(lexicon, set())
    assert scorer.missing == "zero"


def test_key_function_with_composite_keys(lexicon):
    records = [
        SourceRecord(text="good", group_key=("iphone", "trump")),
        SourceRecord(text="bad", group_key=("android", "trump")),
        SourceRecord(text="meh", group_key=("web", "clinton")),
        SourceRecord(text="great", group_key=("iphone", "clinton")),
    ]
    scorer = GroupSentimentScorer(lexicon, set(), missing="zero", key_of=lambda t: t.group_key[0])
    result = scorer.run(records)

    assert [(s.group_key, s.raw_score) for s in result.scores] == [("iphone", 2), ("web", 0), ("android", -1)]


def test_from_config_loads_files(lexicon_csv, stopwords_file, monkeypatch):
    monkeypatch.setattr(Config, "LEXICON_PATH", str(lexicon_csv))
    monkeypatch.setattr(Config, "STOPWORDS_PATH", str(stopwords_file))

    scorer = GroupSentimentScorer.from_config(missing="omit")

    assert scorer.lexicon["good"] == SentimentClass.POSITIVE
    assert scorer.stopwords == {"the", "a", "an"}


def test_unhashable_group_key_is_skipped(lexicon):
    records = [SourceRecord(text="good", group_key=["a", "list"]), SourceRecord(text="bad", group_key="B")]
    result = GroupSentimentScorer(lexicon, set(), missing="omit").run(records)

    assert [(s.index, s.reason) for s in result.skipped] == [(0, "unhashable group key (list)")]
    assert [s.group_key for s in result.scores] == ["B"]


def test_nan_in_composite_key_is_skipped(lexicon):
    records = [
        SourceRecord(text="good", group_key=("iphone", float("nan"))),
        SourceRecord(text="bad", group_key=float("nan")),
        SourceRecord(text="great", group_key=("iphone", 1)),
    ]
    result = GroupSentimentScorer(lexicon, set(), missing="omit").run(records)

    assert [(s.index, s.reason) for s in result.skipped] == [(0, "missing group key"), (1, "missing group key")]
    assert [s.group_key for s in result.scores] == [("iphone", 1)]


def test_zero_policy_key_of_by_record_index(lexicon):
    records = [
        SourceRecord(text="good", group_key="A"),
        SourceRecord(text="nothing", group_key="B"),
        SourceRecord(text="bad", group_key="C"),
    ]
    scorer = GroupSentimentScorer(lexicon, set(), missing="zero", key_of=lambda t: t.record_index % 2)
    result = scorer.run(records)

    # records 0 and 2 share group 0; record 1 is reported with no scores
    assert [(s.group_key, s.raw_score, s.has_scores) for s in result.scores] == [(0, 0, True), (1, 0, False)]
