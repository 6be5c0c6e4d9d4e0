import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ───── API Keys & URLs ─────
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/learning_portal")
MONGODB_DB = os.getenv("MONGODB_DB", "learning_portal")
HF_TOKEN = os.getenv("HF_TOKEN", "")
HF_ANALYSIS_MODEL = os.getenv("HF_ANALYSIS_MODEL", "meta-llama/Llama-3.1-8B-Instruct")
SEMANTIC_MODEL_NAME = os.getenv("SEMANTIC_MODEL_NAME", "all-MiniLM-L6-v2")

# "mongo" or "memory" (process-local, lost on restart)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mongo")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# ───── Pipeline options ─────
USE_MODEL_ANALYSIS = _env_bool("USE_MODEL_ANALYSIS", False)
CORPUS_SCAN_LIMIT = int(os.getenv("CORPUS_SCAN_LIMIT", "10"))
COMPARISON_TIMEOUT_MS = int(os.getenv("COMPARISON_TIMEOUT_MS", "15000"))
ANALYSIS_TIMEOUT_MS = int(os.getenv("ANALYSIS_TIMEOUT_MS", "30000"))
MAX_CONCURRENT_COMPARISONS = int(os.getenv("MAX_CONCURRENT_COMPARISONS", "3"))

# ───── Corpus comparison ─────
CORPUS_MATCH_FLOOR = 30
COMPARISON_PREFIX_CHARS = 3000
SEMANTIC_SECTION_THRESHOLD = 0.75
FUZZY_SECTION_THRESHOLD = 85
MAX_MATCHED_SECTIONS = 5

# ───── Authorship analysis ─────
AUTHORSHIP_PREFIX_CHARS = 6000
AI_ASSISTED_THRESHOLD = 30
AI_GENERATED_THRESHOLD = 60
LONG_SENTENCE_WORDS = 40
SHORT_CONTENT_SENTENCES = 10
SHORT_CONTENT_WORDS = 300

# ───── Domain gating (tunable, calibrate against real submissions) ─────
DOMAIN_MIN_WEIGHT = 3
DOMAIN_MIN_CONFIDENCE = 40
PATTERN_MIN_HITS = 3
TOPIC_MIN_OCCURRENCES = 3

# ───── Web pattern scoring ─────
WEB_SCORE_PER_SOURCE = 20
WEB_SCORE_CAP = 85
WEB_SCORE_FLOOR = 15
MAX_DEEP_CANDIDATES = 10
MAX_REPEATED_PHRASES = 5

# ───── Verdict weights & thresholds ─────
DATABASE_WEIGHT = 0.40
AUTHORSHIP_WEIGHT = 0.35
WEB_WEIGHT = 0.25
PLAGIARIZED_THRESHOLD = 70
REVIEW_THRESHOLD = 45
CAUTION_THRESHOLD = 20

# ───── Duplicate-check flow ─────
DUPLICATE_REPORT_THRESHOLD = 41
DUPLICATE_PLAGIARIZED_THRESHOLD = 61

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "plagiarism_check.log")


class CheckConfig(BaseModel):
    """Options recognised by the plagiarism pipeline."""

    useModelAnalysis: bool = USE_MODEL_ANALYSIS
    corpusScanLimit: int = Field(default=CORPUS_SCAN_LIMIT, ge=1, le=50)
    comparisonTimeoutMs: int = Field(default=COMPARISON_TIMEOUT_MS, gt=0)
    analysisTimeoutMs: int = Field(default=ANALYSIS_TIMEOUT_MS, gt=0)
    maxConcurrentComparisons: int = Field(default=MAX_CONCURRENT_COMPARISONS, ge=1)
