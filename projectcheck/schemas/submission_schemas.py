from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class Submission(BaseModel):
    """The document under test. Never mutated by the pipeline."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    abstract: str = ""
    fullText: str
    submitterId: str
    submitterName: Optional[str] = None
    createdAt: datetime = Field(default_factory=datetime.utcnow)


class CorpusEntry(BaseModel):
    """A previously accepted submission eligible for comparison."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    fullText: str
    submitterId: str
    submitterName: str = "Unknown"
    submittedAt: Optional[datetime] = None


# ---- Request bodies ----

class ProjectCheckRequest(BaseModel):
    title: str = ""
    abstract: str = ""
    fullText: str
    submitterId: str
    submitterName: Optional[str] = None


class AssignmentCheckRequest(BaseModel):
    text: str
    assignmentId: str
    studentId: Optional[str] = None
    studentName: Optional[str] = None


class CompareTextsRequest(BaseModel):
    text1: str
    text2: str


class WebCheckRequest(BaseModel):
    text: str
