from enum import Enum
from pydantic import BaseModel, Field
from typing import List

from projectcheck.schemas.plagiarism_schemas import SimilarityMatch, WebSourceCandidate


class WritingStyle(str, Enum):
    technical = "Technical"
    research = "Research"
    business = "Business"
    academic = "Academic"


class ContentProfile(BaseModel):
    """Structural facts read once from a submission. Recomputed per check."""
    sections: List[str] = Field(default_factory=list)
    paragraphCount: int = 0
    avgParagraphWords: float = 0.0
    sentenceCount: int = 0
    avgSentenceWords: float = 0.0
    mainTopics: List[str] = Field(default_factory=list)
    writingStyle: WritingStyle = WritingStyle.academic
    depthScore: int = Field(default=0, ge=0, le=4)
    citationCount: int = 0
    hasLiteratureReview: bool = False
    hasMethodology: bool = False
    hasResults: bool = False
    hasReferences: bool = False
    hasTechnicalContent: bool = False
    hasResearchContent: bool = False
    hasBusinessContent: bool = False


class DomainVerdict(BaseModel):
    domain: str = "General"
    confidence: int = Field(default=0, ge=0, le=100)
    weight: int = 0
    runnerUp: str = ""
    runnerUpWeight: int = 0


class EntryComparison(BaseModel):
    similarityScore: float = Field(ge=0, le=100)
    matchedSections: List[str] = Field(default_factory=list)
    analysis: str = ""


class CorpusResult(BaseModel):
    matches: List[SimilarityMatch] = Field(default_factory=list)
    highestSimilarity: float = 0.0
    checkedEntries: int = 0
    skippedEntries: int = 0


class WebPatternResult(BaseModel):
    webPlagiarismScore: int = Field(default=15, ge=0, le=100)
    suspiciousSources: List[WebSourceCandidate] = Field(default_factory=list)
    commonPatterns: List[str] = Field(default_factory=list)
    searchPhrases: List[str] = Field(default_factory=list)
