import json

from conftest import AI_HEAVY_TEXT, FakeInferenceClient

from projectcheck.schemas.plagiarism_schemas import AiDetectionVerdict
from projectcheck.utils.ai_detector import (
    ModelAuthorshipAnalyzer,
    RuleBasedAuthorshipAnalyzer,
    phrase_hits,
    repeated_openers,
    verdict_for_likelihood,
)


def test_verdict_bands():
    assert verdict_for_likelihood(29) == AiDetectionVerdict.human_written
    assert verdict_for_likelihood(30) == AiDetectionVerdict.likely_ai_assisted
    assert verdict_for_likelihood(59) == AiDetectionVerdict.likely_ai_assisted
    assert verdict_for_likelihood(60) == AiDetectionVerdict.likely_ai_generated


def test_phrase_hits_counts_each_phrase():
    hits = phrase_hits("Furthermore, it works. Furthermore, it scales. Moreover, it is cheap.")
    assert hits["furthermore"] == 2
    assert hits["moreover"] == 1


def test_repeated_openers():
    sentences = ["The system is fast", "The system is cheap", "Users like it a lot"]
    assert repeated_openers(sentences) == {"the system is": 2}


def test_short_uncited_text_raises_red_flags():
    report = RuleBasedAuthorshipAnalyzer().analyze("Title", "", "This is a tiny text about nothing much at all.")
    assert any(f.startswith("Missing citations") for f in report.redFlags)
    assert any(f.startswith("Very short content") for f in report.redFlags)
    assert report.analyzer == "rule-based"
    assert report.originalityScore < 100


def test_generic_phrasing_reads_as_ai_generated():
    report = RuleBasedAuthorshipAnalyzer().analyze("", "", AI_HEAVY_TEXT)
    assert report.aiDetectionVerdict == AiDetectionVerdict.likely_ai_generated
    assert report.aiGeneratedLikelihood >= 60
    assert any("generic AI-style phrasing" in f for f in report.redFlags)
    assert report.originalityScore <= 40


def test_scores_stay_in_range():
    for text in ["", "word", AI_HEAVY_TEXT * 10]:
        report = RuleBasedAuthorshipAnalyzer().analyze("", "", text)
        assert 0 <= report.originalityScore <= 100
        assert 0 <= report.aiGeneratedLikelihood <= 100


def test_model_analyzer_uses_model_reply():
    reply = "Here you go:\n" + json.dumps({
        "originalityScore": 30,
        "aiGeneratedLikelihood": 72,
        "aiIndicators": ["uniform tone"],
        "redFlags": ["no citations"],
        "confidence": 80,
    })
    analyzer = ModelAuthorshipAnalyzer(client=FakeInferenceClient(reply=reply))
    report = analyzer.analyze("T", "A", "Body text.")
    assert report.analyzer == "model"
    assert report.originalityScore == 30
    assert report.aiDetectionVerdict == AiDetectionVerdict.likely_ai_generated


def test_model_analyzer_falls_back_on_malformed_json():
    analyzer = ModelAuthorshipAnalyzer(client=FakeInferenceClient(reply="I cannot answer {not json"))
    report = analyzer.analyze("T", "A", "Body text with enough words to analyse.")
    assert report.analyzer == "rule-based"


def test_model_analyzer_falls_back_on_backend_error():
    client = FakeInferenceClient(error=ConnectionError("rate limited"))
    report = ModelAuthorshipAnalyzer(client=client).analyze("T", "A", "Body text.")
    assert client.calls == 1
    assert report.analyzer == "rule-based"


def test_model_analyzer_falls_back_on_out_of_range_values():
    reply = json.dumps({"originalityScore": 140, "aiGeneratedLikelihood": 10})
    report = ModelAuthorshipAnalyzer(client=FakeInferenceClient(reply=reply)).analyze("T", "A", "Body.")
    assert report.analyzer == "rule-based"
