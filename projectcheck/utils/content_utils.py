"""
Structural reading of a submission: sections, paragraph and sentence
statistics, topic keywords, writing style and citation density.
Every function here is a pure function of its input and degrades to
empty/zero values instead of raising.
"""
import re
from typing import List, Tuple

from nltk import FreqDist

from projectcheck.schemas.analysis_schemas import ContentProfile, WritingStyle
from projectcheck.utils.lexical_utils import (
    STOP_WORDS,
    contains_term,
    count_term,
    split_into_paragraphs,
    split_into_sentences,
    word_count,
    word_tokens,
)

SECTION_HEADERS = [
    "abstract", "introduction", "background", "literature review", "related work",
    "methodology", "methods", "research design", "implementation", "system design",
    "results", "findings", "discussion", "analysis", "conclusion", "recommendations",
    "references", "bibliography", "appendix",
]

LITERATURE_HEADERS = ("literature review", "related work")
METHODOLOGY_HEADERS = ("methodology", "methods", "research design")
RESULTS_HEADERS = ("results", "findings")
REFERENCE_HEADERS = ("references", "bibliography")

TECHNICAL_MARKERS = [
    "algorithm", "api", "backend", "frontend", "database", "source code", "function",
    "framework", "javascript", "python", "java", "html", "css", "sql", "server",
    "deployment", "programming", "software", "repository", "react", "node.js", "mongodb",
]
RESEARCH_MARKERS = [
    "hypothesis", "experiment", "survey", "sample", "participant", "respondent",
    "questionnaire", "statistical", "regression", "interview", "dataset", "empirical",
    "correlation", "significant",
]
BUSINESS_MARKERS = [
    "business", "market", "revenue", "customer", "profit", "entrepreneur", "sales",
    "enterprise", "stakeholder", "investment", "marketing", "management",
]

MARKER_MIN_HITS = 3
MARKER_MIN_DISTINCT = 2
TOPIC_COUNT = 10
TOPIC_MIN_LENGTH = 4

CITATION_PATTERNS = [
    re.compile(r"\(\d{4}\)"),                      # (2021)
    re.compile(r"\bet al\.", re.IGNORECASE),       # Smith et al.
    re.compile(r"\[\d+\]"),                        # [12]
    re.compile(r"\b[A-Z][a-z]+,\s*\(?\d{4}\)?"),   # Smith, (2021) / Smith, 2021
]


def detect_sections(text: str) -> List[str]:
    return [h for h in SECTION_HEADERS if contains_term(text, h)]


def _marker_hits(text: str, markers: List[str]) -> Tuple[int, int]:
    counts = [count_term(text, m) for m in markers]
    return sum(counts), sum(1 for c in counts if c)


def _has_markers(text: str, markers: List[str]) -> bool:
    total, distinct = _marker_hits(text, markers)
    return total >= MARKER_MIN_HITS and distinct >= MARKER_MIN_DISTINCT


def extract_topics(text: str, top_n: int = TOPIC_COUNT) -> List[str]:
    words = [
        w for w in word_tokens(text)
        if w.isalpha() and len(w) > TOPIC_MIN_LENGTH and w not in STOP_WORDS
    ]
    if not words:
        return []
    return [word for word, _ in FreqDist(words).most_common(top_n)]


def count_citations(text: str) -> int:
    return sum(len(p.findall(text or "")) for p in CITATION_PATTERNS)


def _average_words(chunks: List[str]) -> float:
    if not chunks:
        return 0.0
    return round(sum(word_count(c) for c in chunks) / len(chunks), 1)


def analyze_content(title: str, abstract: str, full_text: str) -> ContentProfile:
    title, abstract, full_text = title or "", abstract or "", full_text or ""
    combined = f"{title}\n{abstract}\n{full_text}"

    sections = detect_sections(combined)
    paragraphs = split_into_paragraphs(full_text)
    sentences = split_into_sentences(full_text)

    has_lit = any(h in sections for h in LITERATURE_HEADERS)
    has_method = any(h in sections for h in METHODOLOGY_HEADERS)
    has_results = any(h in sections for h in RESULTS_HEADERS)
    has_refs = any(h in sections for h in REFERENCE_HEADERS)

    technical = _has_markers(combined, TECHNICAL_MARKERS)
    research = _has_markers(combined, RESEARCH_MARKERS)
    business = _has_markers(combined, BUSINESS_MARKERS)

    if technical:
        style = WritingStyle.technical
    elif research:
        style = WritingStyle.research
    elif business:
        style = WritingStyle.business
    else:
        style = WritingStyle.academic

    return ContentProfile(
        sections=sections,
        paragraphCount=len(paragraphs),
        avgParagraphWords=_average_words(paragraphs),
        sentenceCount=len(sentences),
        avgSentenceWords=_average_words(sentences),
        mainTopics=extract_topics(combined),
        writingStyle=style,
        depthScore=sum([has_lit, has_method, has_results, has_refs]),
        citationCount=count_citations(full_text),
        hasLiteratureReview=has_lit,
        hasMethodology=has_method,
        hasResults=has_results,
        hasReferences=has_refs,
        hasTechnicalContent=technical,
        hasResearchContent=research,
        hasBusinessContent=business,
    )
