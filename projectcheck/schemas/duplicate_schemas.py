from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class DatabaseVerdict(str, Enum):
    original = "ORIGINAL"
    suspicious = "SUSPICIOUS"
    plagiarized = "PLAGIARIZED"


class OriginalityVerdict(str, Enum):
    likely_original = "LIKELY_ORIGINAL"
    needs_review = "NEEDS_REVIEW"
    likely_copied = "LIKELY_COPIED"


class FinalVerdict(str, Enum):
    original = "ORIGINAL"
    needs_review = "NEEDS_REVIEW"
    plagiarized = "PLAGIARIZED"


class TextComparison(BaseModel):
    plagiarismScore: float
    verdict: DatabaseVerdict
    analysis: str
    similarSections: List[str] = Field(default_factory=list)


class SubmissionMatch(BaseModel):
    studentId: str
    studentName: Optional[str] = None
    plagiarismScore: float
    verdict: DatabaseVerdict
    analysis: str
    similarSections: List[str] = Field(default_factory=list)


class DatabaseCheck(BaseModel):
    totalChecked: int = 0
    matchesFound: int = 0
    highestMatch: Optional[SubmissionMatch] = None
    allMatches: List[SubmissionMatch] = Field(default_factory=list)
    overallVerdict: DatabaseVerdict = DatabaseVerdict.original


class WebCheck(BaseModel):
    originalityScore: int
    verdict: OriginalityVerdict
    analysis: str
    indicators: List[str] = Field(default_factory=list)


class ComprehensiveCheck(BaseModel):
    databaseCheck: DatabaseCheck
    webCheck: WebCheck
    finalVerdict: FinalVerdict
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SubmissionSummary(BaseModel):
    studentId: str
    studentName: Optional[str] = None
    submittedAt: datetime
    textLength: int


class AssignmentStats(BaseModel):
    assignmentId: str
    totalSubmissions: int
    submissions: List[SubmissionSummary] = Field(default_factory=list)
