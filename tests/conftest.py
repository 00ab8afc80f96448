import pytest

from scripts.polarity_analysis import SentimentClass
from scripts.text_prep import SourceRecord


@pytest.fixture
def lexicon():
    return {
        "good": SentimentClass.POSITIVE,
        "great": SentimentClass.POSITIVE,
        "bad": SentimentClass.NEGATIVE,
        "awful": SentimentClass.NEGATIVE,
        "boat": "neither",
    }


@pytest.fixture
def stopwords():
    return {"the", "a"}


@pytest.fixture
def scenario_records():
    return [
        SourceRecord(text="the good boat", group_key="A"),
        SourceRecord(text="a bad boat", group_key="B"),
    ]


@pytest.fixture
def lexicon_csv(tmp_path):
    path = tmp_path / "lexicon.csv"
    path.write_text(
        "word,sentiment\n"
        "good,positive\n"
        "Great,positive\n"
        "bad,negative\n"
        "awful,negative\n"
        "awful,fear\n"
        "happy,joy\n"
    )
    return path


@pytest.fixture
def stopwords_file(tmp_path):
    path = tmp_path / "stop_words.txt"
    path.write_text("# english stop words\nThe\na\n\nan  # article\n")
    return path
