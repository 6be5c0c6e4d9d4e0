import asyncio

import pytest

from conftest import AI_HEAVY_TEXT, COVID_ABSTRACT, COVID_TEXT, COVID_TITLE, FixedAuthorshipAnalyzer

from projectcheck.config import CheckConfig
from projectcheck.errors import InputError, PipelineFailure
from projectcheck.schemas.plagiarism_schemas import ReportStatus
from projectcheck.schemas.submission_schemas import CorpusEntry, Submission
from projectcheck.utils.plagiarism_pipeline import PlagiarismPipeline
from projectcheck.utils.repositories import InMemoryCorpusSource, InMemoryReportRepository


def _pipeline(**kwargs):
    return PlagiarismPipeline(CheckConfig(useModelAnalysis=False), **kwargs)


def test_verbatim_copy_of_corpus_entry_is_plagiarized():
    submission = Submission(title="Digital Transformation", fullText=AI_HEAVY_TEXT, submitterId="s2")
    corpus = [CorpusEntry(id="p1", title="Older project", fullText=AI_HEAVY_TEXT, submitterId="s1", submitterName="Ada")]

    report = asyncio.run(_pipeline().run(submission, corpus))

    assert report.databaseMatches[0].similarity == 100
    assert report.databaseMatches[0].submitterName == "Ada"
    assert report.overallScore >= 70
    assert report.status == ReportStatus.plagiarized


def test_original_business_paper_passes():
    submission = Submission(title=COVID_TITLE, abstract=COVID_ABSTRACT, fullText=COVID_TEXT, submitterId="s2")
    report = asyncio.run(_pipeline(authorship_analyzer=FixedAuthorshipAnalyzer(originality=95)).run(submission, []))

    assert report.databaseMatches == []
    assert report.domain == "Business"
    assert report.status in (ReportStatus.original, ReportStatus.suspicious)
    assert report.overallScore < 45
    assert all(s.sourceType not in ("GitHub", "Tutorial") for s in report.webSources)


def test_empty_text_is_rejected():
    submission = Submission(title="Empty", fullText="   ", submitterId="s1")
    with pytest.raises(InputError):
        asyncio.run(_pipeline().run(submission, []))


def test_check_and_record_saves_complete_report():
    reports = InMemoryReportRepository()
    source = InMemoryCorpusSource([
        CorpusEntry(id="p1", title="Older project", fullText=AI_HEAVY_TEXT, submitterId="s1"),
        CorpusEntry(id="own", title="My draft", fullText=AI_HEAVY_TEXT, submitterId="s2"),
    ])
    submission = Submission(title="Copy", fullText=AI_HEAVY_TEXT, submitterId="s2")

    report = asyncio.run(_pipeline().check_and_record("sub-1", submission, source, reports))
    stored = asyncio.run(reports.get_report("sub-1"))

    assert stored.status == report.status == ReportStatus.plagiarized
    assert stored.report.overallScore == report.overallScore
    assert [m.entryId for m in stored.report.databaseMatches] == ["p1"]


class BrokenCorpusSource:
    async def fetch(self, exclude_submitter_id, limit):
        raise ConnectionError("database unreachable")


def test_failure_marks_status_failed_without_report():
    reports = InMemoryReportRepository()
    submission = Submission(title="T", fullText="Some real text to check for the course.", submitterId="s2")

    with pytest.raises(PipelineFailure):
        asyncio.run(_pipeline().check_and_record("sub-2", submission, BrokenCorpusSource(), reports))

    stored = asyncio.run(reports.get_report("sub-2"))
    assert stored.status == ReportStatus.failed
    assert stored.report is None


class SlowAuthorshipAnalyzer:
    name = "slow"

    def analyze(self, title, abstract, full_text):
        import time
        time.sleep(0.5)
        return FixedAuthorshipAnalyzer().analyze(title, abstract, full_text)


def test_slow_authorship_analysis_falls_back_to_rule_based():
    pipeline = PlagiarismPipeline(
        CheckConfig(useModelAnalysis=False, analysisTimeoutMs=50),
        authorship_analyzer=SlowAuthorshipAnalyzer(),
    )
    submission = Submission(title="T", fullText="A short text written for the test case.", submitterId="s1")
    report = asyncio.run(pipeline.run(submission, []))
    assert report.authorshipInsights.analyzer == "rule-based"


class RecordingReportRepository(InMemoryReportRepository):
    def __init__(self):
        super().__init__()
        self.writes = []

    async def set_status(self, submission_id, status):
        self.writes.append(status)
        await super().set_status(submission_id, status)

    async def save_report(self, submission_id, report):
        self.writes.append(report.status)
        await super().save_report(submission_id, report)


def test_status_moves_from_pending_through_checking():
    reports = RecordingReportRepository()
    submission = Submission(title="Copy", fullText=AI_HEAVY_TEXT, submitterId="s2")
    source = InMemoryCorpusSource([CorpusEntry(id="p1", fullText=AI_HEAVY_TEXT, submitterId="s1")])

    asyncio.run(_pipeline().check_and_record("sub-3", submission, source, reports))

    assert reports.writes == [ReportStatus.pending, ReportStatus.checking, ReportStatus.plagiarized]


def test_failed_rerun_does_not_keep_previous_report():
    reports = InMemoryReportRepository()
    submission = Submission(title="Copy", fullText=AI_HEAVY_TEXT, submitterId="s2")
    source = InMemoryCorpusSource([CorpusEntry(id="p1", fullText=AI_HEAVY_TEXT, submitterId="s1")])
    asyncio.run(_pipeline().check_and_record("sub-4", submission, source, reports))

    with pytest.raises(PipelineFailure):
        asyncio.run(_pipeline().check_and_record("sub-4", submission, BrokenCorpusSource(), reports))

    stored = asyncio.run(reports.get_report("sub-4"))
    assert stored.status == ReportStatus.failed
    assert stored.report is None


def test_timed_out_authorship_fallback_runs_in_worker_thread(monkeypatch):
    pipeline = PlagiarismPipeline(
        CheckConfig(useModelAnalysis=False, analysisTimeoutMs=50),
        authorship_analyzer=SlowAuthorshipAnalyzer(),
    )
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
    submission = Submission(title="T", fullText="A short text written for the test case.", submitterId="s1")
    asyncio.run(pipeline.run(submission, []))

    assert pipeline._rule_based_authorship.analyze in offloaded
