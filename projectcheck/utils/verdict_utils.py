"""
Combines the corpus, authorship and web signals into one score and maps it
onto the status/verdict/recommendation bundle reviewers see.
"""
import logging
from typing import List, Optional, Tuple

from projectcheck.config import (
    AUTHORSHIP_WEIGHT,
    CAUTION_THRESHOLD,
    DATABASE_WEIGHT,
    PLAGIARIZED_THRESHOLD,
    REVIEW_THRESHOLD,
    WEB_WEIGHT,
)
from projectcheck.schemas.analysis_schemas import ContentProfile, CorpusResult, WebPatternResult
from projectcheck.schemas.plagiarism_schemas import AuthorshipReport, PlagiarismReport, ReportStatus

logger = logging.getLogger("projectcheck.verdict")


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def calculate_overall_score(highest_similarity: float, originality_score: float, web_score: float) -> int:
    score = _round_half_up(
        DATABASE_WEIGHT * highest_similarity
        + AUTHORSHIP_WEIGHT * (100 - originality_score)
        + WEB_WEIGHT * web_score
    )
    return min(100, max(0, score))


def status_for_score(score: int) -> ReportStatus:
    if score >= PLAGIARIZED_THRESHOLD:
        return ReportStatus.plagiarized
    if score >= CAUTION_THRESHOLD:
        return ReportStatus.suspicious
    return ReportStatus.original


def _profile_facts(profile: Optional[ContentProfile]) -> str:
    if profile is None:
        return ""
    return (
        f"The document shows {len(profile.sections)} recognised section(s), "
        f"{profile.citationCount} citation(s) and a depth score of {profile.depthScore}/4. "
    )


def _profile_recommendations(profile: Optional[ContentProfile]) -> List[str]:
    if profile is None:
        return []
    extra = []
    if profile.citationCount == 0:
        extra.append("Add in-text citations and a references section")
    if profile.depthScore < 2:
        extra.append("Strengthen the literature review and methodology sections")
    return extra


def determine_verdict(
    score: int,
    corpus: CorpusResult,
    authorship: AuthorshipReport,
    web: WebPatternResult,
    profile: Optional[ContentProfile] = None,
) -> Tuple[ReportStatus, str, str, List[str]]:
    facts = _profile_facts(profile)
    n_matches = len(corpus.matches)

    if score >= PLAGIARIZED_THRESHOLD:
        status = ReportStatus.plagiarized
        message = "SEVERE PLAGIARISM DETECTED - Project Rejected"
        detailed = (
            f"This project has been flagged for severe plagiarism with an overall score of {score}%. "
            + (f"Found {n_matches} similar existing project(s), the closest at {corpus.highestSimilarity:.0f}%. " if n_matches else "")
            + (f"Authorship analysis raised {len(authorship.redFlags)} red flag(s). " if authorship.redFlags else "")
            + facts
            + "This submission cannot be accepted."
        )
        recommendations = [
            "Submit completely original work",
            "Properly cite all sources",
            "Rewrite content in your own words",
            "Consult with supervisor before resubmission",
        ]
    elif score >= REVIEW_THRESHOLD:
        status = ReportStatus.suspicious
        message = "SUSPICIOUS - Requires Manual Review"
        detailed = (
            f"This project shows concerning similarity patterns ({score}%). "
            + (f"Similar to {n_matches} existing project(s). " if n_matches else "")
            + (f"Suspicious writing patterns detected ({len(authorship.suspiciousPatterns)}). " if authorship.suspiciousPatterns else "")
            + facts
            + "Manual review by supervisor required before approval."
        )
        recommendations = [
            "Review and revise flagged sections",
            "Add proper citations where missing",
            "Explain similar content to reviewer",
            "Provide evidence of original work",
        ]
    elif score >= CAUTION_THRESHOLD:
        status = ReportStatus.suspicious
        message = "MODERATE CONCERNS - Proceed with Caution"
        detailed = (
            f"Some similarities detected ({score}%). While not conclusive, this requires attention. "
            + ("Contains patterns common in online material. " if web.commonPatterns else "")
            + facts
            + "Review recommended before final submission."
        )
        recommendations = [
            "Review citation formatting",
            "Ensure all quotes are attributed",
            "Add more original analysis",
            "Consider supervisor consultation",
        ]
    else:
        status = ReportStatus.original
        message = "ORIGINAL WORK - Passed Plagiarism Check"
        detailed = (
            f"This project appears to be original work ({score}% similarity score). "
            + (f"Strengths identified: {', '.join(authorship.strengths)}. " if authorship.strengths else "")
            + facts
            + "Approved for submission pending final review."
        )
        recommendations = [
            "Proceed with submission",
            "Double-check citation formatting",
            "Maintain academic integrity",
            "Keep documentation of your work process",
        ]

    return status, message, detailed, recommendations + _profile_recommendations(profile)


def aggregate(
    corpus: CorpusResult,
    authorship: AuthorshipReport,
    web: WebPatternResult,
    profile: Optional[ContentProfile] = None,
    domain: Optional[str] = None,
) -> PlagiarismReport:
    score = calculate_overall_score(
        corpus.highestSimilarity, authorship.originalityScore, web.webPlagiarismScore
    )
    status, message, detailed, recommendations = determine_verdict(score, corpus, authorship, web, profile)
    logger.info(f"📊 Overall score {score}% -> {status.value}")

    return PlagiarismReport(
        overallScore=score,
        status=status,
        verdictMessage=message,
        detailedAnalysis=detailed,
        databaseMatches=corpus.matches,
        webSources=web.suspiciousSources,
        authorshipInsights=authorship,
        recommendations=recommendations,
        domain=domain,
    )
