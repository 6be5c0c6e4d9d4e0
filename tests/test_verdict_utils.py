import pytest

from projectcheck.schemas.analysis_schemas import ContentProfile, CorpusResult, WebPatternResult
from projectcheck.schemas.plagiarism_schemas import (
    AiDetectionVerdict,
    AuthorshipReport,
    ReportStatus,
    SimilarityMatch,
)
from projectcheck.utils.verdict_utils import aggregate, calculate_overall_score, status_for_score


def _authorship(originality):
    return AuthorshipReport(
        originalityScore=originality,
        aiGeneratedLikelihood=15,
        aiDetectionVerdict=AiDetectionVerdict.human_written,
    )


def _corpus(highest):
    if not highest:
        return CorpusResult()
    match = SimilarityMatch(entryId="e1", entryTitle="Old project", submitterName="A. Student", similarity=highest)
    return CorpusResult(matches=[match], highestSimilarity=highest, checkedEntries=1)


@pytest.mark.parametrize("highest, originality, web, expected", [
    (100, 75, 85, 70),
    (100, 78, 85, 69),
    (50, 100, 0, 20),
    (47.5, 100, 0, 19),
    (0, 90, 15, 7),
    (0, 100, 0, 0),
    (100, 0, 100, 100),
])
def test_weighted_score(highest, originality, web, expected):
    assert calculate_overall_score(highest, originality, web) == expected


def test_status_boundaries():
    assert status_for_score(70) == ReportStatus.plagiarized
    assert status_for_score(69) == ReportStatus.suspicious
    assert status_for_score(45) == ReportStatus.suspicious
    assert status_for_score(20) == ReportStatus.suspicious
    assert status_for_score(19) == ReportStatus.original


def test_score_is_monotonic_in_each_input():
    base = calculate_overall_score(40, 60, 40)
    assert calculate_overall_score(60, 60, 40) >= base
    assert calculate_overall_score(40, 40, 40) >= base
    assert calculate_overall_score(40, 60, 60) >= base


def test_plagiarized_report():
    report = aggregate(_corpus(100), _authorship(75), WebPatternResult(webPlagiarismScore=85))
    assert report.overallScore == 70
    assert report.status == ReportStatus.plagiarized
    assert report.verdictMessage.startswith("SEVERE PLAGIARISM")
    assert "Submit completely original work" in report.recommendations


def test_review_band_report():
    report = aggregate(_corpus(100), _authorship(78), WebPatternResult(webPlagiarismScore=85))
    assert report.overallScore == 69
    assert report.status == ReportStatus.suspicious
    assert report.verdictMessage.startswith("SUSPICIOUS")


def test_caution_band_report():
    report = aggregate(_corpus(50), _authorship(100), WebPatternResult(webPlagiarismScore=0))
    assert report.overallScore == 20
    assert report.status == ReportStatus.suspicious
    assert report.verdictMessage.startswith("MODERATE CONCERNS")


def test_original_report_with_profile_recommendations():
    profile = ContentProfile(citationCount=0, depthScore=1, sections=["introduction"])
    report = aggregate(CorpusResult(), _authorship(90), WebPatternResult(webPlagiarismScore=15), profile, "Business")
    assert report.overallScore == 7
    assert report.status == ReportStatus.original
    assert report.verdictMessage.startswith("ORIGINAL WORK")
    assert report.domain == "Business"
    assert "Add in-text citations and a references section" in report.recommendations
    assert "1 recognised section(s)" in report.detailedAnalysis
