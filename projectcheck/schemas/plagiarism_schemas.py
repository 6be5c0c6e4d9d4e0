from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ReportStatus(str, Enum):
    pending = "PENDING"
    checking = "CHECKING"
    original = "ORIGINAL"
    suspicious = "SUSPICIOUS"
    plagiarized = "PLAGIARIZED"
    failed = "FAILED"


class AiDetectionVerdict(str, Enum):
    human_written = "HUMAN_WRITTEN"
    likely_ai_assisted = "LIKELY_AI_ASSISTED"
    likely_ai_generated = "LIKELY_AI_GENERATED"


class SimilarityMatch(BaseModel):
    entryId: str
    entryTitle: str
    submitterName: str
    similarity: float   # percent (0–100)
    matchedSections: List[str] = Field(default_factory=list)
    analysis: str = ""


class WebSourceCandidate(BaseModel):
    sourceType: str     # "GitHub" | "Tutorial" | "AcademicResearch" | "DeepAnalysis" | ...
    likelihood: int = Field(ge=0, le=100)
    reason: str
    indicators: List[str] = Field(default_factory=list)
    # Constructed search links for human follow-up, never fetched.
    suggestedSearchUrls: List[str] = Field(default_factory=list)
    confirmed: bool = False


class AuthorshipReport(BaseModel):
    originalityScore: int = Field(ge=0, le=100)
    aiGeneratedLikelihood: int = Field(ge=0, le=100)
    aiDetectionVerdict: AiDetectionVerdict
    aiIndicators: List[str] = Field(default_factory=list)
    redFlags: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    suspiciousPatterns: List[str] = Field(default_factory=list)
    citationIssues: str = ""
    detailedAnalysis: str = ""
    confidence: int = Field(default=0, ge=0, le=100)
    analyzer: str = "rule-based"


class PlagiarismReport(BaseModel):
    overallScore: int = Field(ge=0, le=100)
    status: ReportStatus
    verdictMessage: str
    detailedAnalysis: str
    databaseMatches: List[SimilarityMatch] = Field(default_factory=list)
    webSources: List[WebSourceCandidate] = Field(default_factory=list)
    authorshipInsights: AuthorshipReport
    recommendations: List[str] = Field(default_factory=list)
    domain: Optional[str] = None
    checkedAt: datetime = Field(default_factory=datetime.utcnow)


class StoredReport(BaseModel):
    submissionId: str
    status: ReportStatus = ReportStatus.pending
    report: Optional[PlagiarismReport] = None
    updatedAt: datetime = Field(default_factory=datetime.utcnow)
