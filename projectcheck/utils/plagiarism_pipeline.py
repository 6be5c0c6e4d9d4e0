"""
End-to-end plagiarism check for a project submission.

    Submission ─┬─ analyze_content ─┐
                └─ classify_domain ─┤
                                    ├─ CorpusComparator     ─┐
                                    ├─ AuthorshipAnalyzer   ─┼─ aggregate -> PlagiarismReport
                                    └─ WebPatternDetector   ─┘

Each stage receives the immutable Submission and returns its own result
object; nothing is shared between stages. A run either produces a complete
report or raises PipelineFailure.
"""
import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

from projectcheck.config import CheckConfig
from projectcheck.errors import InputError, PipelineFailure
from projectcheck.schemas.plagiarism_schemas import AuthorshipReport, PlagiarismReport, ReportStatus
from projectcheck.schemas.submission_schemas import CorpusEntry, Submission
from projectcheck.utils.ai_detector import (
    AuthorshipAnalyzer,
    RuleBasedAuthorshipAnalyzer,
    build_authorship_analyzer,
)
from projectcheck.utils.content_utils import analyze_content
from projectcheck.utils.corpus_utils import CorpusComparator, build_comparer
from projectcheck.utils.domain_utils import classify_domain
from projectcheck.utils.repositories import CorpusSource, ReportRepository
from projectcheck.utils.verdict_utils import aggregate
from projectcheck.utils.web_utils import WebPatternDetector, build_web_detector

logger = logging.getLogger("projectcheck.pipeline")


def validate_submission(submission: Submission) -> None:
    if not submission.fullText or not submission.fullText.strip():
        raise InputError("fullText is required and must not be empty")
    if not submission.submitterId:
        raise InputError("submitterId is required")


class PlagiarismPipeline:
    def __init__(
        self,
        config: Optional[CheckConfig] = None,
        corpus_comparator: Optional[CorpusComparator] = None,
        authorship_analyzer: Optional[AuthorshipAnalyzer] = None,
        web_detector: Optional[WebPatternDetector] = None,
    ):
        self.config = config or CheckConfig()
        self.corpus_comparator = corpus_comparator or CorpusComparator(build_comparer(self.config), self.config)
        self.authorship_analyzer = authorship_analyzer or build_authorship_analyzer(self.config.useModelAnalysis)
        self.web_detector = web_detector or build_web_detector(self.config.useModelAnalysis)
        self._rule_based_authorship = RuleBasedAuthorshipAnalyzer()

    async def _authorship(self, submission: Submission) -> AuthorshipReport:
        timeout = self.config.analysisTimeoutMs / 1000
        args = (submission.title, submission.abstract, submission.fullText)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.authorship_analyzer.analyze, *args),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"⏱️  Authorship analysis exceeded {timeout:.0f}s; using rule-based analyzer")
            return await asyncio.to_thread(self._rule_based_authorship.analyze, *args)

    async def run(self, submission: Submission, corpus: Sequence[CorpusEntry]) -> PlagiarismReport:
        validate_submission(submission)
        t0 = datetime.utcnow()
        logger.info(f"🔍 Starting plagiarism check for \"{submission.title[:60]}\"")

        try:
            profile, domain = await asyncio.gather(
                asyncio.to_thread(analyze_content, submission.title, submission.abstract, submission.fullText),
                asyncio.to_thread(classify_domain, submission.title, submission.abstract, submission.fullText),
            )
            logger.info(
                f"   ➤ {profile.sentenceCount} sentences, style {profile.writingStyle.value}, "
                f"domain {domain.domain} ({domain.confidence}%)"
            )

            corpus_result, authorship, web = await asyncio.gather(
                self.corpus_comparator.compare_against_corpus(submission, corpus, submission.submitterId),
                self._authorship(submission),
                asyncio.to_thread(
                    self.web_detector.detect,
                    submission.title, submission.abstract, submission.fullText, profile, domain,
                ),
            )

            report = aggregate(corpus_result, authorship, web, profile, domain.domain)
        except Exception as e:
            logger.error(f"❌ Plagiarism check failed: {e}", exc_info=True)
            raise PipelineFailure(f"Failed to complete plagiarism check: {e}") from e

        elapsed = (datetime.utcnow() - t0).total_seconds()
        logger.info(f"✅ Plagiarism check done in {elapsed:.1f}s: {report.overallScore}% {report.status.value}")
        return report

    async def check_and_record(
        self,
        submission_id: str,
        submission: Submission,
        corpus_source: CorpusSource,
        reports: ReportRepository,
    ) -> PlagiarismReport:
        """
        PENDING -> CHECKING -> ORIGINAL | SUSPICIOUS | PLAGIARIZED | FAILED.
        The report is written once, only when complete. On failure only the
        FAILED status is recorded and the error is re-raised.
        """
        validate_submission(submission)
        await reports.set_status(submission_id, ReportStatus.pending)
        await reports.set_status(submission_id, ReportStatus.checking)
        try:
            corpus = await corpus_source.fetch(submission.submitterId, self.config.corpusScanLimit)
            report = await self.run(submission, corpus)
        except asyncio.CancelledError:
            # Cancelled checks keep their CHECKING marker and nothing else.
            raise
        except Exception as e:
            await reports.set_status(submission_id, ReportStatus.failed)
            if isinstance(e, PipelineFailure):
                raise
            raise PipelineFailure(f"Failed to complete plagiarism check: {e}") from e

        await reports.save_report(submission_id, report)
        return report
