"""
Persistence seams used by the checker.

The in-memory implementations are process-local: they are lost on restart and
are not shared between workers, so a multi-process deployment must use the
MongoDB implementations (or another shared store).
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from projectcheck.schemas.plagiarism_schemas import PlagiarismReport, ReportStatus, StoredReport
from projectcheck.schemas.submission_schemas import CorpusEntry, Submission

logger = logging.getLogger("projectcheck.repositories")

ACCEPTED_STATUSES = ["SUBMITTED", "UNDER_REVIEW", "APPROVED"]


class CorpusSource(Protocol):
    async def fetch(self, exclude_submitter_id: str, limit: int) -> List[CorpusEntry]:
        """Accepted entries by other submitters, most recent first."""
        ...


class SubmissionStore(Protocol):
    async def get(self, assignment_id: str) -> List[Submission]:
        ...

    async def append(self, assignment_id: str, submission: Submission) -> None:
        ...

    async def clear(self, assignment_id: str) -> None:
        ...


class ReportRepository(Protocol):
    async def set_status(self, submission_id: str, status: ReportStatus) -> None:
        ...

    async def save_report(self, submission_id: str, report: PlagiarismReport) -> None:
        ...

    async def get_report(self, submission_id: str) -> Optional[StoredReport]:
        ...


# ---- In-memory ----

class InMemoryCorpusSource:
    def __init__(self, entries: Optional[Sequence[CorpusEntry]] = None):
        self.entries: List[CorpusEntry] = list(entries or [])

    def add(self, entry: CorpusEntry) -> None:
        self.entries.append(entry)

    async def fetch(self, exclude_submitter_id: str, limit: int) -> List[CorpusEntry]:
        ordered = sorted(
            self.entries,
            key=lambda e: e.submittedAt or datetime.min,
            reverse=True,
        )
        return [e for e in ordered if e.submitterId != exclude_submitter_id][:limit]


class InMemorySubmissionStore:
    def __init__(self):
        self._submissions: Dict[str, List[Submission]] = defaultdict(list)

    async def get(self, assignment_id: str) -> List[Submission]:
        return list(self._submissions.get(assignment_id, []))

    async def append(self, assignment_id: str, submission: Submission) -> None:
        self._submissions[assignment_id].append(submission)

    async def clear(self, assignment_id: str) -> None:
        self._submissions.pop(assignment_id, None)


class InMemoryReportRepository:
    def __init__(self):
        self._reports: Dict[str, StoredReport] = {}

    async def set_status(self, submission_id: str, status: ReportStatus) -> None:
        # A bare status write replaces any earlier report.
        self._reports[submission_id] = StoredReport(submissionId=submission_id, status=status)

    async def save_report(self, submission_id: str, report: PlagiarismReport) -> None:
        self._reports[submission_id] = StoredReport(
            submissionId=submission_id, status=report.status, report=report
        )

    async def get_report(self, submission_id: str) -> Optional[StoredReport]:
        return self._reports.get(submission_id)


# ---- MongoDB ----

class MongoCorpusSource:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "projectsubmissions"):
        self.collection = db[collection]

    async def fetch(self, exclude_submitter_id: str, limit: int) -> List[CorpusEntry]:
        cursor = (
            self.collection.find(
                {"studentId": {"$ne": exclude_submitter_id}, "submissionStatus": {"$in": ACCEPTED_STATUSES}},
                {"title": 1, "fullText": 1, "studentId": 1, "studentName": 1, "submittedAt": 1},
            )
            .sort("submittedAt", -1)
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)
        entries = []
        for doc in docs:
            if not doc.get("fullText"):
                logger.warning(f"Corpus document {doc.get('_id')} has no fullText, skipping")
                continue
            entries.append(CorpusEntry(
                id=str(doc["_id"]),
                title=doc.get("title", ""),
                fullText=doc["fullText"],
                submitterId=str(doc.get("studentId", "")),
                submitterName=doc.get("studentName") or "Unknown",
                submittedAt=doc.get("submittedAt"),
            ))
        return entries


class MongoSubmissionStore:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "assignment_submissions"):
        self.collection = db[collection]

    async def get(self, assignment_id: str) -> List[Submission]:
        cursor = self.collection.find({"assignmentId": assignment_id}).sort("createdAt", 1)
        docs = await cursor.to_list(length=None)
        return [
            Submission(
                title=d.get("title", ""),
                abstract=d.get("abstract", ""),
                fullText=d["fullText"],
                submitterId=d["submitterId"],
                submitterName=d.get("submitterName"),
                createdAt=d["createdAt"],
            )
            for d in docs
        ]

    async def append(self, assignment_id: str, submission: Submission) -> None:
        await self.collection.insert_one({"assignmentId": assignment_id, **submission.model_dump()})

    async def clear(self, assignment_id: str) -> None:
        result = await self.collection.delete_many({"assignmentId": assignment_id})
        logger.info(f"Cleared {result.deleted_count} submission(s) for assignment {assignment_id}")


class MongoReportRepository:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "plagiarism_reports"):
        self.collection = db[collection]

    async def set_status(self, submission_id: str, status: ReportStatus) -> None:
        await self.collection.update_one(
            {"submissionId": submission_id},
            {
                "$set": {"status": status.value, "updatedAt": datetime.utcnow()},
                "$unset": {"report": ""},
            },
            upsert=True,
        )

    async def save_report(self, submission_id: str, report: PlagiarismReport) -> None:
        # Single write so readers never see a half-scored report.
        await self.collection.update_one(
            {"submissionId": submission_id},
            {"$set": {
                "status": report.status.value,
                "report": report.model_dump(mode="json"),
                "updatedAt": datetime.utcnow(),
            }},
            upsert=True,
        )

    async def get_report(self, submission_id: str) -> Optional[StoredReport]:
        doc = await self.collection.find_one({"submissionId": submission_id})
        if not doc:
            return None
        return StoredReport(
            submissionId=submission_id,
            status=ReportStatus(doc["status"]),
            report=PlagiarismReport.model_validate(doc["report"]) if doc.get("report") else None,
            updatedAt=doc.get("updatedAt") or datetime.utcnow(),
        )
