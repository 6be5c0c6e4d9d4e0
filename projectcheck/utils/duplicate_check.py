"""
Assignment-level duplicate checking.

A lighter flow than the project pipeline: each text handed in for an
assignment is compared with the earlier accepted texts of the same
assignment, and graded for generic originality. Only texts that come out
ORIGINAL are added to the assignment's store.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from projectcheck.config import DUPLICATE_PLAGIARIZED_THRESHOLD, DUPLICATE_REPORT_THRESHOLD
from projectcheck.errors import InputError
from projectcheck.schemas.duplicate_schemas import (
    AssignmentStats,
    ComprehensiveCheck,
    DatabaseCheck,
    DatabaseVerdict,
    FinalVerdict,
    OriginalityVerdict,
    SubmissionMatch,
    SubmissionSummary,
    TextComparison,
    WebCheck,
)
from projectcheck.schemas.submission_schemas import Submission
from projectcheck.utils.ai_detector import AuthorshipAnalyzer, RuleBasedAuthorshipAnalyzer
from projectcheck.utils.lexical_utils import matching_sentences, similarity
from projectcheck.utils.repositories import SubmissionStore

logger = logging.getLogger("projectcheck.duplicates")

LIKELY_ORIGINAL_FLOOR = 70
NEEDS_REVIEW_FLOOR = 40


def verdict_for_similarity(score: float) -> DatabaseVerdict:
    if score >= DUPLICATE_PLAGIARIZED_THRESHOLD:
        return DatabaseVerdict.plagiarized
    if score >= DUPLICATE_REPORT_THRESHOLD:
        return DatabaseVerdict.suspicious
    return DatabaseVerdict.original


def verdict_for_originality(score: int) -> OriginalityVerdict:
    if score >= LIKELY_ORIGINAL_FLOOR:
        return OriginalityVerdict.likely_original
    if score >= NEEDS_REVIEW_FLOOR:
        return OriginalityVerdict.needs_review
    return OriginalityVerdict.likely_copied


def compare_texts(text1: str, text2: str) -> TextComparison:
    if not text1 or not text1.strip() or not text2 or not text2.strip():
        raise InputError("Both text1 and text2 are required")

    score = similarity(text1, text2)
    sections = matching_sentences(text1, text2)
    verdict = verdict_for_similarity(score)
    return TextComparison(
        plagiarismScore=score,
        verdict=verdict,
        analysis=f"{score:.0f}% token overlap; {len(sections)} near-identical sentence(s).",
        similarSections=sections,
    )


def check_against_submissions(text: str, previous: Sequence[Submission]) -> DatabaseCheck:
    matches: List[SubmissionMatch] = []
    for prior in previous:
        result = compare_texts(text, prior.fullText)
        if result.plagiarismScore >= DUPLICATE_REPORT_THRESHOLD:
            matches.append(SubmissionMatch(
                studentId=prior.submitterId,
                studentName=prior.submitterName,
                plagiarismScore=result.plagiarismScore,
                verdict=result.verdict,
                analysis=result.analysis,
                similarSections=result.similarSections,
            ))

    matches.sort(key=lambda m: m.plagiarismScore, reverse=True)
    if matches and matches[0].plagiarismScore >= DUPLICATE_PLAGIARIZED_THRESHOLD:
        overall = DatabaseVerdict.plagiarized
    elif matches:
        overall = DatabaseVerdict.suspicious
    else:
        overall = DatabaseVerdict.original

    return DatabaseCheck(
        totalChecked=len(previous),
        matchesFound=len(matches),
        highestMatch=matches[0] if matches else None,
        allMatches=matches,
        overallVerdict=overall,
    )


def check_generic_originality(text: str, analyzer: Optional[AuthorshipAnalyzer] = None) -> WebCheck:
    if not text or not text.strip():
        raise InputError("Text is required")

    report = (analyzer or RuleBasedAuthorshipAnalyzer()).analyze("", "", text)
    return WebCheck(
        originalityScore=report.originalityScore,
        verdict=verdict_for_originality(report.originalityScore),
        analysis=report.detailedAnalysis,
        indicators=report.redFlags + report.aiIndicators,
    )


def determine_final_verdict(database_check: DatabaseCheck, web_check: WebCheck) -> FinalVerdict:
    if (database_check.overallVerdict == DatabaseVerdict.plagiarized
            or web_check.verdict == OriginalityVerdict.likely_copied):
        return FinalVerdict.plagiarized
    if (database_check.overallVerdict == DatabaseVerdict.suspicious
            or web_check.verdict == OriginalityVerdict.needs_review):
        return FinalVerdict.needs_review
    return FinalVerdict.original


def comprehensive_check(
    text: str,
    previous: Sequence[Submission] = (),
    analyzer: Optional[AuthorshipAnalyzer] = None,
) -> ComprehensiveCheck:
    if not text or not text.strip():
        raise InputError("Text is required")

    database_check = check_against_submissions(text, previous)
    web_check = check_generic_originality(text, analyzer)
    final = determine_final_verdict(database_check, web_check)
    logger.info(
        f"📋 Duplicate check: {database_check.matchesFound}/{database_check.totalChecked} match(es), "
        f"originality {web_check.originalityScore}% -> {final.value}"
    )
    return ComprehensiveCheck(databaseCheck=database_check, webCheck=web_check, finalVerdict=final)


async def check_and_store(
    text: str,
    assignment_id: str,
    store: SubmissionStore,
    student_id: Optional[str] = None,
    student_name: Optional[str] = None,
    analyzer: Optional[AuthorshipAnalyzer] = None,
) -> ComprehensiveCheck:
    if not text or not text.strip() or not assignment_id:
        raise InputError("Text and assignmentId are required")

    previous = await store.get(assignment_id)
    result = comprehensive_check(text, previous, analyzer)

    if result.finalVerdict == FinalVerdict.original:
        await store.append(assignment_id, Submission(
            fullText=text,
            submitterId=student_id or "anonymous",
            submitterName=student_name,
            createdAt=datetime.utcnow(),
        ))
        logger.info(f"💾 Stored submission for assignment {assignment_id}")
    return result


async def assignment_stats(assignment_id: str, store: SubmissionStore) -> AssignmentStats:
    submissions = await store.get(assignment_id)
    return AssignmentStats(
        assignmentId=assignment_id,
        totalSubmissions=len(submissions),
        submissions=[
            SubmissionSummary(
                studentId=s.submitterId,
                studentName=s.submitterName,
                submittedAt=s.createdAt,
                textLength=len(s.fullText),
            )
            for s in submissions
        ],
    )
