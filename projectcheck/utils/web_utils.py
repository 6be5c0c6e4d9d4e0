"""
Web-presence heuristics.

Nothing here fetches a page. Submissions are matched against signatures of
well-known frameworks, tutorial projects, business templates and common
academic topics, and suspicious passages are turned into search-query links
for a human reviewer. Every URL produced is a suggestion (`confirmed=False`).

Checks are domain-gated:
  - framework and generic CS project signatures only for Computer Science or
    Engineering submissions whose content profile is itself technical;
  - business template signatures only for Business or Economics;
  - academic topics only when the topic term is dense (>= TOPIC_MIN_OCCURRENCES)
    in the body or appears in the title/abstract.
A business paper that mentions "React" once therefore never gets a MERN flag.
"""
import logging
import re
from collections import Counter
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote_plus

from huggingface_hub import InferenceClient
from nltk.util import ngrams
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from projectcheck.config import (
    HF_ANALYSIS_MODEL,
    MAX_DEEP_CANDIDATES,
    MAX_REPEATED_PHRASES,
    PATTERN_MIN_HITS,
    TOPIC_MIN_OCCURRENCES,
    WEB_SCORE_CAP,
    WEB_SCORE_FLOOR,
    WEB_SCORE_PER_SOURCE,
)
from projectcheck.errors import AnalysisBackendError
from projectcheck.schemas.analysis_schemas import (
    ContentProfile,
    DomainVerdict,
    WebPatternResult,
    WritingStyle,
)
from projectcheck.schemas.plagiarism_schemas import WebSourceCandidate
from projectcheck.utils.inference_utils import ask_for_json, build_inference_client
from projectcheck.utils.lexical_utils import (
    STOP_WORDS,
    count_term,
    split_into_sentences,
    word_count,
    word_tokens,
)

logger = logging.getLogger("projectcheck.web")

TECH_DOMAINS = {"Computer Science", "Engineering"}
BUSINESS_DOMAINS = {"Business", "Economics"}
TECH_SOURCE_TYPES = {"GitHub", "Tutorial", "Documentation", "StackOverflow", "YouTube", "Course"}
TECH_TERMS = [
    "react", "node", "node.js", "mern", "mongodb", "express", "firebase", "django",
    "flask", "laravel", "spring boot", "angular", "vue", "tensorflow", "github",
]
DEEP_ANALYSIS_TYPE = "DeepAnalysis"
DEEP_ANALYSIS_LIKELIHOOD = 25

GOOGLE_SEARCH = "https://www.google.com/search?q="
SCHOLAR_SEARCH = "https://scholar.google.com/scholar?q="
GITHUB_SEARCH = "https://github.com/search?type=repositories&q="

# ---- Signatures ----
# name, keywords (all must co-occur), source type, likelihood, reference links

FRAMEWORK_PATTERNS: List[Dict] = [
    {
        "name": "MERN Stack",
        "keywords": ["mongodb", "express", "react", "node"],
        "sourceType": "GitHub",
        "likelihood": 65,
        "urls": [
            GITHUB_SEARCH + "mern+stack",
            "https://www.mongodb.com/resources/languages/mern-stack-tutorial",
            "https://www.freecodecamp.org/news/search/?query=mern%20stack",
        ],
    },
    {
        "name": "React + Firebase",
        "keywords": ["react", "firebase"],
        "sourceType": "Tutorial",
        "likelihood": 55,
        "urls": [
            GITHUB_SEARCH + "react+firebase",
            "https://firebase.google.com/docs/web/setup",
        ],
    },
    {
        "name": "Django REST Framework",
        "keywords": ["django", "rest framework"],
        "sourceType": "Documentation",
        "likelihood": 55,
        "urls": [
            "https://www.django-rest-framework.org/tutorial/quickstart/",
            GITHUB_SEARCH + "django+rest+framework",
        ],
    },
    {
        "name": "Flask Web Application",
        "keywords": ["flask", "python"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [
            "https://flask.palletsprojects.com/en/stable/tutorial/",
            GITHUB_SEARCH + "flask+app",
        ],
    },
    {
        "name": "Spring Boot Application",
        "keywords": ["spring boot", "java"],
        "sourceType": "Documentation",
        "likelihood": 50,
        "urls": [
            "https://spring.io/guides",
            GITHUB_SEARCH + "spring+boot",
        ],
    },
    {
        "name": "Laravel Application",
        "keywords": ["laravel", "php"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [
            "https://laravel.com/docs",
            GITHUB_SEARCH + "laravel",
        ],
    },
    {
        "name": "TensorFlow / Keras Model",
        "keywords": ["tensorflow", "keras"],
        "sourceType": "Tutorial",
        "likelihood": 55,
        "urls": [
            "https://www.tensorflow.org/tutorials",
            "https://keras.io/examples/",
        ],
    },
    {
        "name": "Static Website (HTML/CSS/JavaScript)",
        "keywords": ["html", "css", "javascript"],
        "sourceType": "Tutorial",
        "likelihood": 45,
        "urls": [
            "https://www.w3schools.com/howto/",
            "https://developer.mozilla.org/en-US/docs/Learn",
        ],
    },
    {
        "name": "Arduino Sensor Project",
        "keywords": ["arduino", "sensor"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [
            "https://projecthub.arduino.cc/",
            "https://www.instructables.com/circuits/arduino/projects/",
        ],
    },
]

GENERIC_PROJECT_PATTERNS: List[Dict] = [
    {
        "name": "E-Commerce Platform",
        "keywords": ["e-commerce", "shopping cart", "product"],
        "sourceType": "Tutorial",
        "likelihood": 60,
        "urls": [GITHUB_SEARCH + "ecommerce+website", GOOGLE_SEARCH + "e-commerce+website+project+tutorial"],
    },
    {
        "name": "Student Management System",
        "keywords": ["student", "management system"],
        "sourceType": "GitHub",
        "likelihood": 55,
        "urls": [GITHUB_SEARCH + "student+management+system"],
    },
    {
        "name": "Library Management System",
        "keywords": ["library", "management system"],
        "sourceType": "GitHub",
        "likelihood": 55,
        "urls": [GITHUB_SEARCH + "library+management+system"],
    },
    {
        "name": "Hospital Management System",
        "keywords": ["hospital", "management system", "patient"],
        "sourceType": "GitHub",
        "likelihood": 55,
        "urls": [GITHUB_SEARCH + "hospital+management+system"],
    },
    {
        "name": "Real-time Chat Application",
        "keywords": ["chat", "real-time", "socket"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [GITHUB_SEARCH + "realtime+chat+app", "https://socket.io/get-started/chat"],
    },
    {
        "name": "Weather Application",
        "keywords": ["weather", "forecast", "api"],
        "sourceType": "Tutorial",
        "likelihood": 45,
        "urls": [GITHUB_SEARCH + "weather+app"],
    },
    {
        "name": "Face Recognition Attendance",
        "keywords": ["face recognition", "attendance"],
        "sourceType": "GitHub",
        "likelihood": 55,
        "urls": [GITHUB_SEARCH + "face+recognition+attendance"],
    },
    {
        "name": "Sentiment Analysis",
        "keywords": ["sentiment analysis", "dataset"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [GITHUB_SEARCH + "sentiment+analysis", "https://www.kaggle.com/search?q=sentiment+analysis"],
    },
    {
        "name": "Fake News Detection",
        "keywords": ["fake news", "classifier"],
        "sourceType": "Tutorial",
        "likelihood": 50,
        "urls": [GITHUB_SEARCH + "fake+news+detection", "https://www.kaggle.com/search?q=fake+news"],
    },
    {
        "name": "JWT Authentication Boilerplate",
        "keywords": ["authentication", "jwt"],
        "sourceType": "Tutorial",
        "likelihood": 45,
        "urls": [GITHUB_SEARCH + "jwt+authentication+boilerplate", "https://jwt.io/introduction"],
    },
]

BUSINESS_PATTERNS: List[Dict] = [
    {
        "name": "SWOT Analysis Template",
        "keywords": ["swot", "strengths", "weaknesses", "threats"],
        "sourceType": "BusinessTemplate",
        "likelihood": 45,
        "urls": [GOOGLE_SEARCH + "swot+analysis+template"],
    },
    {
        "name": "Business Plan Template",
        "keywords": ["business plan", "market analysis", "financial"],
        "sourceType": "BusinessTemplate",
        "likelihood": 45,
        "urls": [GOOGLE_SEARCH + "business+plan+template", "https://www.sba.gov/business-guide/plan-your-business/write-your-business-plan"],
    },
    {
        "name": "Marketing Mix (4Ps)",
        "keywords": ["marketing mix", "price", "promotion"],
        "sourceType": "BusinessTemplate",
        "likelihood": 40,
        "urls": [GOOGLE_SEARCH + "marketing+mix+4ps+case+study"],
    },
    {
        "name": "Porter's Five Forces",
        "keywords": ["five forces", "competitive"],
        "sourceType": "BusinessTemplate",
        "likelihood": 40,
        "urls": [GOOGLE_SEARCH + "porter+five+forces+analysis+example"],
    },
    {
        "name": "Customer Satisfaction Survey Study",
        "keywords": ["customer satisfaction", "questionnaire"],
        "sourceType": "AcademicResearch",
        "likelihood": 40,
        "urls": [SCHOLAR_SEARCH + "customer+satisfaction+questionnaire+study"],
    },
    {
        "name": "Pandemic Impact on Small Businesses",
        "keywords": ["covid-19", "small business", "pandemic"],
        "sourceType": "AcademicResearch",
        "likelihood": 40,
        "urls": [SCHOLAR_SEARCH + "covid-19+impact+on+small+businesses"],
    },
]

ACADEMIC_TOPICS: List[str] = [
    "marketing", "governance", "patient care", "climate change", "covid-19",
    "small business", "social media", "mental health", "entrepreneurship", "e-learning",
    "renewable energy", "cybersecurity", "unemployment", "food security", "supply chain",
    "artificial intelligence", "corporate social responsibility", "financial inclusion",
]
ACADEMIC_TOPIC_LIKELIHOOD = 35

GENERIC_OPENERS = (
    "this study", "this project", "this paper", "this research", "this chapter", "in this",
    "the purpose", "the aim", "the objective", "in conclusion", "in summary", "furthermore",
    "moreover", "however", "therefore", "additionally", "firstly", "secondly", "finally",
)
PASSAGE_MIN_WORDS, PASSAGE_MAX_WORDS = 10, 25
LONG_PASSAGE_WORDS = 40


# ---- Helpers ----
def _normalize_whitespace(s: str) -> str:
    return " ".join(s.split())


def prepare_search_query(text: str, max_len: int = 200) -> str:
    t = _normalize_whitespace(text or "")
    if len(t) > max_len:
        t = t[:max_len].rsplit(" ", 1)[0]
    return t


def exact_phrase_search_url(phrase: str) -> str:
    return GOOGLE_SEARCH + quote_plus('"' + prepare_search_query(phrase) + '"')


def general_search_url(phrase: str) -> str:
    return GOOGLE_SEARCH + quote_plus(prepare_search_query(phrase))


def topic_search_urls(topic: str) -> List[str]:
    return [
        SCHOLAR_SEARCH + quote_plus(topic),
        GOOGLE_SEARCH + quote_plus(f"{topic} research paper pdf"),
        "https://www.researchgate.net/search/publication?q=" + quote_plus(topic),
    ]


def web_score(pattern_sources: int) -> int:
    if pattern_sources <= 0:
        return WEB_SCORE_FLOOR
    return min(WEB_SCORE_CAP, pattern_sources * WEB_SCORE_PER_SOURCE)


def match_signature(text: str, keywords: List[str]) -> Optional[Dict[str, int]]:
    """Keyword counts when every keyword occurs and the combined hits reach PATTERN_MIN_HITS."""
    counts = {kw: count_term(text, kw) for kw in keywords}
    if all(counts.values()) and sum(counts.values()) >= PATTERN_MIN_HITS:
        return counts
    return None


def tech_gate_open(domain: DomainVerdict, profile: ContentProfile) -> bool:
    return domain.domain in TECH_DOMAINS and (
        profile.hasTechnicalContent or profile.writingStyle == WritingStyle.technical
    )


def business_gate_open(domain: DomainVerdict) -> bool:
    return domain.domain in BUSINESS_DOMAINS


def mentions_tech(text: str) -> bool:
    return any(count_term(text, t) for t in TECH_TERMS)


def _signature_candidate(pattern: Dict, counts: Dict[str, int]) -> WebSourceCandidate:
    indicators = [f"\"{kw}\" x{c}" for kw, c in counts.items()]
    return WebSourceCandidate(
        sourceType=pattern["sourceType"],
        likelihood=pattern["likelihood"],
        reason=f"Matches the common {pattern['name']} pattern",
        indicators=indicators,
        suggestedSearchUrls=list(pattern["urls"]),
    )


# ---- Deep content extraction ----
def extract_suspicious_passages(full_text: str, limit: int = MAX_DEEP_CANDIDATES) -> List[str]:
    """Mid-length sentences without generic openers, plus any very long sentence."""
    passages: List[str] = []
    for sent in split_into_sentences(full_text):
        clean = _normalize_whitespace(sent)
        n = word_count(clean)
        if n > LONG_PASSAGE_WORDS:
            passages.append(clean)
        elif PASSAGE_MIN_WORDS <= n <= PASSAGE_MAX_WORDS and not clean.lower().startswith(GENERIC_OPENERS):
            passages.append(clean)
        if len(passages) >= limit:
            break
    return passages


def repeated_phrases(full_text: str, limit: int = MAX_REPEATED_PHRASES) -> List[str]:
    """Content-word 2-3 grams that occur at least twice."""
    tokens = word_tokens(full_text)
    counts = Counter()
    for n in (2, 3):
        for gram in ngrams(tokens, n):
            if all(w.isalpha() and len(w) > 2 and w not in STOP_WORDS for w in gram):
                counts[" ".join(gram)] += 1
    return [phrase for phrase, c in counts.most_common() if c >= 2][:limit]


def deep_content_candidate(full_text: str) -> Optional[WebSourceCandidate]:
    passages = extract_suspicious_passages(full_text)
    phrases = repeated_phrases(full_text)
    if not passages and not phrases:
        return None

    urls: List[str] = []
    for passage in passages:
        urls.append(exact_phrase_search_url(passage))
        urls.append(general_search_url(passage))
    for phrase in phrases:
        urls.append(exact_phrase_search_url(phrase))

    indicators = [f"Passage: \"{p[:120]}\"" for p in passages]
    indicators += [f"Repeated phrase: \"{p}\"" for p in phrases]
    return WebSourceCandidate(
        sourceType=DEEP_ANALYSIS_TYPE,
        likelihood=DEEP_ANALYSIS_LIKELIHOOD,
        reason=(
            f"{len(passages)} passage(s) and {len(phrases)} repeated phrase(s) selected for manual "
            f"web search; not verified matches"
        ),
        indicators=indicators,
        suggestedSearchUrls=urls,
    )


# ---- Detectors ----
class WebPatternDetector(Protocol):
    name: str

    def detect(
        self,
        title: str,
        abstract: str,
        full_text: str,
        profile: ContentProfile,
        domain: DomainVerdict,
    ) -> WebPatternResult:
        ...


class RuleBasedWebPatternDetector:
    name = "rule-based"

    def _signatures(self, text: str, patterns: List[Dict], sources: List[WebSourceCandidate], common: List[str]):
        for pattern in patterns:
            counts = match_signature(text, pattern["keywords"])
            if counts:
                sources.append(_signature_candidate(pattern, counts))
                common.append(pattern["name"])

    def _academic_topics(self, head: str, body: str, sources: List[WebSourceCandidate], common: List[str]):
        for topic in ACADEMIC_TOPICS:
            in_head = count_term(head, topic)
            in_body = count_term(body, topic)
            if not in_head and in_body < TOPIC_MIN_OCCURRENCES:
                continue
            sources.append(WebSourceCandidate(
                sourceType="AcademicResearch",
                likelihood=ACADEMIC_TOPIC_LIKELIHOOD,
                reason=f"\"{topic}\" is a heavily published topic; compare against existing papers",
                indicators=[f"\"{topic}\" in title/abstract x{in_head}", f"\"{topic}\" in body x{in_body}"],
                suggestedSearchUrls=topic_search_urls(topic),
            ))
            common.append(f"Common academic topic: {topic}")

    def detect(
        self,
        title: str,
        abstract: str,
        full_text: str,
        profile: ContentProfile,
        domain: DomainVerdict,
    ) -> WebPatternResult:
        head = f"{title or ''} {abstract or ''}"
        text = f"{head}\n{full_text or ''}"
        sources: List[WebSourceCandidate] = []
        common: List[str] = []

        if tech_gate_open(domain, profile):
            self._signatures(text, FRAMEWORK_PATTERNS, sources, common)
            self._signatures(text, GENERIC_PROJECT_PATTERNS, sources, common)
        else:
            logger.info(f"Tech pattern checks skipped (domain={domain.domain}, style={profile.writingStyle.value})")

        if business_gate_open(domain):
            self._signatures(text, BUSINESS_PATTERNS, sources, common)

        self._academic_topics(head, full_text or "", sources, common)

        pattern_sources = len(sources)
        score = web_score(pattern_sources)

        deep = deep_content_candidate(full_text or "")
        search_phrases: List[str] = []
        if deep is not None:
            sources.append(deep)
            search_phrases = extract_suspicious_passages(full_text or "") + repeated_phrases(full_text or "")

        logger.info(f"🌐 Web patterns: {pattern_sources} source(s), score {score}%")
        return WebPatternResult(
            webPlagiarismScore=score,
            suspiciousSources=sources,
            commonPatterns=common,
            searchPhrases=search_phrases,
        )


WEB_SYSTEM_PROMPT = (
    "You are an expert at spotting academic work copied from common online sources. "
    "Be strict, and answer with JSON only."
)


def build_web_prompt(title: str, abstract: str, full_text: str, prefix_chars: int = 3000) -> str:
    return f"""Analyze whether this project looks copied from online sources (GitHub repositories,
tutorials, documentation, StackOverflow, academic papers, blogs).

PROJECT TITLE: {title}

ABSTRACT: {abstract}

SAMPLE TEXT:
{(full_text or '')[:prefix_chars]}

Only name a source type that fits the subject of the project. For each suspected source give
a likelihood 0-100, the reason, indicators and search or reference URLs a reviewer could open.

Respond in this EXACT JSON format (NO MARKDOWN, JUST JSON):
{{
  "suspiciousSources": [
    {{
      "sourceType": "GitHub|Tutorial|Documentation|AcademicResearch|Blog|StackOverflow",
      "likelihood": <0-100>,
      "reason": "...",
      "indicators": ["..."],
      "possibleUrls": ["..."]
    }}
  ],
  "commonPatterns": ["..."]
}}"""


class ModelWebSource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sourceType: str
    likelihood: float = Field(default=50, ge=0, le=100)
    reason: str = ""
    indicators: List[str] = Field(default_factory=list)
    possibleUrls: List[str] = Field(default_factory=list)


class ModelWebResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    suspiciousSources: List[ModelWebSource] = Field(default_factory=list)
    commonPatterns: List[str] = Field(default_factory=list)


class ModelWebPatternDetector:
    """
    Rule-based detection enriched with sources suggested by the model backend.
    The domain gate is re-applied to the model's answer.
    """

    name = "model"

    def __init__(
        self,
        client: Optional[InferenceClient] = None,
        fallback: Optional[WebPatternDetector] = None,
        model: str = HF_ANALYSIS_MODEL,
    ):
        self.client = client or build_inference_client()
        self.fallback = fallback or RuleBasedWebPatternDetector()
        self.model = model

    def _allowed(self, source: ModelWebSource, tech_open: bool) -> bool:
        if tech_open:
            return True
        if source.sourceType in TECH_SOURCE_TYPES:
            return False
        return not mentions_tech(" ".join([source.reason, *source.indicators]))

    def detect(
        self,
        title: str,
        abstract: str,
        full_text: str,
        profile: ContentProfile,
        domain: DomainVerdict,
    ) -> WebPatternResult:
        base = self.fallback.detect(title, abstract, full_text, profile, domain)
        try:
            raw = ask_for_json(self.client, WEB_SYSTEM_PROMPT, build_web_prompt(title, abstract, full_text), model=self.model)
            parsed = ModelWebResponse.model_validate(raw)
        except (AnalysisBackendError, ValidationError) as e:
            logger.warning(f"⚠️  Model web analysis unusable ({e}); keeping rule-based result")
            return base

        tech_open = tech_gate_open(domain, profile)
        extra: List[WebSourceCandidate] = []
        for src in parsed.suspiciousSources:
            if not self._allowed(src, tech_open):
                logger.info(f"Dropping model source {src.sourceType!r} outside the {domain.domain} domain gate")
                continue
            extra.append(WebSourceCandidate(
                sourceType=src.sourceType,
                likelihood=int(round(src.likelihood)),
                reason=f"Model-suggested: {src.reason}",
                indicators=src.indicators,
                suggestedSearchUrls=[u for u in src.possibleUrls if re.match(r"https?://", u)],
            ))

        deep = [s for s in base.suspiciousSources if s.sourceType == DEEP_ANALYSIS_TYPE]
        patterns = [s for s in base.suspiciousSources if s.sourceType != DEEP_ANALYSIS_TYPE] + extra
        common = base.commonPatterns + [p for p in parsed.commonPatterns if tech_open or not mentions_tech(p)]

        return WebPatternResult(
            webPlagiarismScore=web_score(len(patterns)),
            suspiciousSources=patterns + deep,
            commonPatterns=common,
            searchPhrases=base.searchPhrases,
        )


def build_web_detector(use_model: bool) -> WebPatternDetector:
    if use_model:
        return ModelWebPatternDetector()
    return RuleBasedWebPatternDetector()
