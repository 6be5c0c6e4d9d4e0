# projectcheck/dependencies/services.py

from functools import lru_cache

from projectcheck.config import MONGODB_DB, STORAGE_BACKEND, CheckConfig
from projectcheck.dependencies.auth import get_mongo_client
from projectcheck.utils.plagiarism_pipeline import PlagiarismPipeline
from projectcheck.utils.repositories import (
    CorpusSource,
    InMemoryCorpusSource,
    InMemoryReportRepository,
    InMemorySubmissionStore,
    MongoCorpusSource,
    MongoReportRepository,
    MongoSubmissionStore,
    ReportRepository,
    SubmissionStore,
)


def _use_mongo() -> bool:
    return STORAGE_BACKEND.lower() == "mongo"


def _database():
    return get_mongo_client()[MONGODB_DB]


@lru_cache(maxsize=1)
def get_config() -> CheckConfig:
    return CheckConfig()


@lru_cache(maxsize=1)
def get_pipeline() -> PlagiarismPipeline:
    return PlagiarismPipeline(get_config())


@lru_cache(maxsize=1)
def get_corpus_source() -> CorpusSource:
    if _use_mongo():
        return MongoCorpusSource(_database())
    return InMemoryCorpusSource()


@lru_cache(maxsize=1)
def get_report_repository() -> ReportRepository:
    if _use_mongo():
        return MongoReportRepository(_database())
    return InMemoryReportRepository()


@lru_cache(maxsize=1)
def get_submission_store() -> SubmissionStore:
    if _use_mongo():
        return MongoSubmissionStore(_database())
    return InMemorySubmissionStore()
