import asyncio
import sys
import time

import pytest

from projectcheck.config import CheckConfig
from projectcheck.schemas.analysis_schemas import EntryComparison
from projectcheck.schemas.submission_schemas import CorpusEntry, Submission
from projectcheck.utils.corpus_utils import CorpusComparator, LexicalComparer, SemanticComparer
from projectcheck.errors import AnalysisBackendError
from projectcheck.utils import semantic_utils

TEXT = (
    "Our inventory platform tracks stock levels across three warehouses. "
    "Managers receive alerts when a product falls below its reorder point. "
    "Weekly reports summarise movements and highlight slow sellers."
)


def _entry(entry_id, text, submitter="other"):
    return CorpusEntry(id=entry_id, title=f"Project {entry_id}", fullText=text, submitterId=submitter)


def _submission(text=TEXT, submitter="me"):
    return Submission(title="Inventory", fullText=text, submitterId=submitter)


def test_identical_entry_scores_100():
    comparator = CorpusComparator(LexicalComparer(), CheckConfig())
    result = asyncio.run(comparator.compare_against_corpus(_submission(), [_entry("e1", TEXT)]))
    assert result.highestSimilarity == 100
    assert result.matches[0].entryId == "e1"
    assert result.matches[0].similarity == 100


def test_own_entries_are_never_compared():
    comparator = CorpusComparator(LexicalComparer(), CheckConfig())
    corpus = [_entry("mine", TEXT, submitter="me")]
    result = asyncio.run(comparator.compare_against_corpus(_submission(), corpus))
    assert result.matches == []
    assert result.checkedEntries == 0


def test_matches_below_floor_are_dropped_and_sorted():
    comparator = CorpusComparator(LexicalComparer(), CheckConfig())
    half_copy = TEXT.split(". ")[0] + ". A completely different description of weather stations follows."
    corpus = [
        _entry("unrelated", "Soil moisture sensors guide irrigation for maize farmers in dry seasons."),
        _entry("partial", half_copy),
        _entry("copy", TEXT),
    ]
    result = asyncio.run(comparator.compare_against_corpus(_submission(), corpus))
    ids = [m.entryId for m in result.matches]
    assert "unrelated" not in ids
    assert ids[0] == "copy"
    assert all(m.similarity >= 30 for m in result.matches)
    sims = [m.similarity for m in result.matches]
    assert sims == sorted(sims, reverse=True)


def test_scan_limit_bounds_the_corpus():
    comparator = CorpusComparator(LexicalComparer(), CheckConfig(corpusScanLimit=2))
    corpus = [_entry(f"e{i}", TEXT) for i in range(5)]
    result = asyncio.run(comparator.compare_against_corpus(_submission(), corpus))
    assert len(result.matches) == 2


class FlakyComparer:
    name = "flaky"

    def compare(self, text, entry):
        if entry.id == "broken":
            raise RuntimeError("encoder crashed")
        return EntryComparison(similarityScore=80, analysis="ok")


def test_failing_entry_is_skipped_not_fatal():
    comparator = CorpusComparator(FlakyComparer(), CheckConfig())
    corpus = [_entry("broken", TEXT), _entry("fine", TEXT)]
    result = asyncio.run(comparator.compare_against_corpus(_submission(), corpus))
    assert [m.entryId for m in result.matches] == ["fine"]
    assert result.skippedEntries == 1
    assert result.checkedEntries == 1


class SlowComparer:
    name = "slow"

    def compare(self, text, entry):
        time.sleep(0.5)
        return EntryComparison(similarityScore=90)


def test_slow_entry_times_out():
    comparator = CorpusComparator(SlowComparer(), CheckConfig(comparisonTimeoutMs=50))
    result = asyncio.run(comparator.compare_against_corpus(_submission(), [_entry("slow", TEXT)]))
    assert result.matches == []
    assert result.skippedEntries == 1


def test_semantic_comparer_falls_back_to_lexical(monkeypatch):
    def unavailable(*args, **kwargs):
        raise AnalysisBackendError("no model")

    monkeypatch.setattr("projectcheck.utils.corpus_utils.calculate_semantic_similarity", unavailable)
    result = SemanticComparer().compare(TEXT, _entry("e1", TEXT))
    assert result.similarityScore == 100
    assert "Token overlap" in result.analysis


class LetterCountEncoder:
    """Deterministic stand-in for a SentenceTransformer."""

    def encode(self, texts, **kwargs):
        import numpy as np

        vectors = np.zeros((len(texts), 26))
        for i, text in enumerate(texts):
            for ch in text.lower():
                if "a" <= ch <= "z":
                    vectors[i, ord(ch) - ord("a")] += 1
        return vectors


def test_semantic_comparer_with_encoder(monkeypatch):
    monkeypatch.setattr("projectcheck.utils.semantic_utils.get_encoder", lambda: LetterCountEncoder())
    result = SemanticComparer().compare(TEXT, _entry("e1", TEXT))
    assert result.similarityScore == 100
    assert len(result.matchedSections) == 3
    assert "Semantic similarity" in result.analysis


def test_failed_encoder_load_falls_back_and_is_not_retried(monkeypatch):
    monkeypatch.setattr(semantic_utils, "_encoder_model", None)
    monkeypatch.setattr(semantic_utils, "_encoder_error", None)
    monkeypatch.setitem(sys.modules, "sentence_transformers", None)

    result = SemanticComparer().compare(TEXT, _entry("e1", TEXT))
    assert result.similarityScore == 100
    assert "Token overlap" in result.analysis

    # the remembered error is raised without another import attempt
    with pytest.raises(AnalysisBackendError):
        semantic_utils.get_encoder()
