"""
Authorship analysis: how likely a submission was written by its submitter
rather than generated by an AI model.

Two analyzers share one output contract (AuthorshipReport):
  - RuleBasedAuthorshipAnalyzer: always available, scans for generic
    AI-sounding phrasing, repetitive structure, very long sentences and
    passive-voice density.
  - ModelAuthorshipAnalyzer: asks a Hugging Face hosted model to grade the
    text against a strict rubric; any backend or parsing problem falls back
    to the rule-based analyzer.
"""
import logging
import re
from collections import Counter
from typing import Dict, List, Optional, Protocol

from huggingface_hub import InferenceClient
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from projectcheck.config import (
    AI_ASSISTED_THRESHOLD,
    AI_GENERATED_THRESHOLD,
    AUTHORSHIP_PREFIX_CHARS,
    HF_ANALYSIS_MODEL,
    LONG_SENTENCE_WORDS,
    SHORT_CONTENT_SENTENCES,
    SHORT_CONTENT_WORDS,
)
from projectcheck.errors import AnalysisBackendError
from projectcheck.schemas.plagiarism_schemas import AiDetectionVerdict, AuthorshipReport
from projectcheck.utils.content_utils import count_citations
from projectcheck.utils.inference_utils import ask_for_json, build_inference_client
from projectcheck.utils.lexical_utils import count_term, split_into_sentences, word_count

logger = logging.getLogger("projectcheck.ai_detector")

AI_PHRASES = [
    # transitional clichés
    "furthermore", "moreover", "additionally", "in addition", "consequently", "hence",
    "thus", "therefore", "nevertheless", "in conclusion", "in summary", "to summarize",
    "overall", "as mentioned above", "as previously mentioned", "on the other hand",
    # redundant openers
    "in today's world", "in today's digital world", "in today's fast-paced world",
    "in the modern era", "in recent years", "since the dawn of", "it is important to note",
    "it is worth noting", "it should be noted", "it is evident that", "needless to say",
    "this project aims to", "the purpose of this study is",
    # generic emphasis
    "plays a crucial role", "plays a vital role", "plays a pivotal role", "a testament to",
    "in the realm of", "delve into", "navigate the complexities", "ever-evolving",
    "cutting-edge", "state-of-the-art", "game-changer", "paradigm shift", "seamless",
    "seamlessly", "robust", "leverage", "holistic", "myriad", "unprecedented",
    "best practices", "industry standards", "industry best practices", "comprehensive solution",
    "a wide range of", "a significant impact", "first and foremost", "last but not least",
]

PHRASE_WEIGHT = 8
REDFLAG_PENALTY = 8
MIN_LIKELIHOOD, MAX_LIKELIHOOD = 15, 95
MIN_ORIGINALITY, MAX_ORIGINALITY = 5, 100
HEAVY_PHRASING_HITS = 5
OPENER_WORDS = 3
PASSIVE_DENSITY_FLAG = 0.3
WELL_CITED = 5

PASSIVE_RE = re.compile(r"\b(?:was|were|been|being)\s+\w+ed\b", re.IGNORECASE)


def clamp(value: float, low: int, high: int) -> int:
    return int(max(low, min(high, round(value))))


def verdict_for_likelihood(likelihood: float) -> AiDetectionVerdict:
    if likelihood >= AI_GENERATED_THRESHOLD:
        return AiDetectionVerdict.likely_ai_generated
    if likelihood >= AI_ASSISTED_THRESHOLD:
        return AiDetectionVerdict.likely_ai_assisted
    return AiDetectionVerdict.human_written


def phrase_hits(text: str) -> Dict[str, int]:
    hits = {}
    for phrase in AI_PHRASES:
        c = count_term(text, phrase)
        if c:
            hits[phrase] = c
    return hits


def repeated_openers(sentences: List[str], n: int = OPENER_WORDS) -> Dict[str, int]:
    """Sentence-opening n-grams shared by two or more sentences."""
    openers = Counter()
    for sent in sentences:
        words = sent.lower().split()
        if len(words) >= n:
            openers[" ".join(words[:n])] += 1
    return {o: c for o, c in openers.most_common() if c >= 2}


class AuthorshipAnalyzer(Protocol):
    name: str

    def analyze(self, title: str, abstract: str, full_text: str) -> AuthorshipReport:
        ...


class RuleBasedAuthorshipAnalyzer:
    name = "rule-based"

    def analyze(self, title: str, abstract: str, full_text: str) -> AuthorshipReport:
        text = f"{title or ''}\n{abstract or ''}\n{full_text or ''}"
        sentences = split_into_sentences(full_text)
        words = word_count(full_text)

        hits = phrase_hits(text)
        total_hits = sum(hits.values())
        openers = repeated_openers(sentences)
        long_sentences = [s for s in sentences if word_count(s) > LONG_SENTENCE_WORDS]
        passive = len(PASSIVE_RE.findall(full_text or ""))
        passive_density = passive / len(sentences) if sentences else 0.0
        citations = count_citations(full_text)

        ai_indicators = [
            f"Generic phrase \"{p}\" used {c} time(s)"
            for p, c in sorted(hits.items(), key=lambda kv: kv[1], reverse=True)
        ]
        suspicious: List[str] = []
        if openers:
            ai_indicators.append(f"{len(openers)} sentence opening(s) repeated across the text")
            suspicious.extend(f"Repeated sentence opening \"{o}\" ({c} sentences)" for o, c in openers.items())
        if long_sentences:
            suspicious.append(f"{len(long_sentences)} very long sentence(s) over {LONG_SENTENCE_WORDS} words")
        if passive_density >= PASSIVE_DENSITY_FLAG:
            suspicious.append(f"High passive-voice density ({passive} passive constructions in {len(sentences)} sentences)")

        red_flags: List[str] = []
        if citations == 0:
            red_flags.append("Missing citations: no in-text references or bibliography entries found")
        if len(sentences) < SHORT_CONTENT_SENTENCES or words < SHORT_CONTENT_WORDS:
            red_flags.append(f"Very short content: {len(sentences)} sentences, {words} words")
        if total_hits >= HEAVY_PHRASING_HITS:
            red_flags.append(f"Heavy use of generic AI-style phrasing ({total_hits} occurrences)")
        if len(openers) >= 2:
            red_flags.append("Repetitive sentence structure across the document")

        strengths: List[str] = []
        if citations >= WELL_CITED:
            strengths.append(f"Supported by {citations} citations")
        if not hits:
            strengths.append("No generic AI-style phrasing detected")
        if len(sentences) >= 30 and not openers:
            strengths.append("Varied sentence structure over a substantial text")

        likelihood = clamp(total_hits * PHRASE_WEIGHT, MIN_LIKELIHOOD, MAX_LIKELIHOOD)
        originality = clamp(100 - likelihood - REDFLAG_PENALTY * len(red_flags), MIN_ORIGINALITY, MAX_ORIGINALITY)
        verdict = verdict_for_likelihood(likelihood)

        if citations == 0:
            citation_issues = "No citations found; every borrowed concept must be attributed."
        elif citations < WELL_CITED:
            citation_issues = f"Only {citations} citation(s) found for the whole document."
        else:
            citation_issues = ""

        detailed = (
            f"Rule-based analysis of {len(sentences)} sentences ({words} words): "
            f"{total_hits} generic phrase occurrence(s), {len(openers)} repeated sentence opening(s), "
            f"{len(long_sentences)} very long sentence(s), {passive} passive construction(s). "
            f"Estimated AI likelihood {likelihood}% ({verdict.value}), originality {originality}%."
        )
        logger.info(f"Rule-based authorship: likelihood={likelihood}% originality={originality}% flags={len(red_flags)}")

        return AuthorshipReport(
            originalityScore=originality,
            aiGeneratedLikelihood=likelihood,
            aiDetectionVerdict=verdict,
            aiIndicators=ai_indicators,
            redFlags=red_flags,
            strengths=strengths,
            suspiciousPatterns=suspicious,
            citationIssues=citation_issues,
            detailedAnalysis=detailed,
            confidence=min(80, 40 + 2 * min(len(sentences), 20)),
            analyzer=self.name,
        )


AUTHORSHIP_SYSTEM_PROMPT = (
    "You are an EXTREMELY STRICT academic plagiarism detector. Be harsh and flag everything "
    "suspicious. Academic integrity is paramount. Answer with JSON only."
)


def build_authorship_prompt(title: str, abstract: str, full_text: str, prefix_chars: int = AUTHORSHIP_PREFIX_CHARS) -> str:
    return f"""Analyze this final year project with MAXIMUM STRICTNESS for originality, plagiarism indicators and AI-generated content.

PROJECT TITLE: {title}

ABSTRACT: {abstract}

FULL TEXT (first {prefix_chars} chars):
{(full_text or '')[:prefix_chars]}

Check for generic or tutorial-like content, inconsistent writing style, missing citations,
AI hallmarks (repetitive structure, robotic formal language, filler phrases such as
"In today's world" or "It is important to note", generic conclusions, surface-level analysis,
made-up statistics or references), boilerplate implementations and lack of evidence of real work.

SCORING - BE HARSH:
- originalityScore: 0-20 obvious copies, 21-40 heavy AI use, 41-60 suspicious, 61-80 some originality, 81-100 truly original (rare)
- aiGeneratedLikelihood: 0-29 human, 30-59 AI-assisted, 60-100 mostly or fully AI

Respond in this EXACT JSON format (NO MARKDOWN, JUST JSON):
{{
  "originalityScore": <0-100>,
  "aiGeneratedLikelihood": <0-100>,
  "aiIndicators": ["..."],
  "redFlags": ["..."],
  "strengths": ["..."],
  "suspiciousPatterns": ["..."],
  "citationIssues": "...",
  "detailedAnalysis": "...",
  "confidence": <0-100>
}}"""


class ModelAuthorshipResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    originalityScore: float = Field(ge=0, le=100)
    aiGeneratedLikelihood: float = Field(ge=0, le=100)
    aiIndicators: List[str] = Field(default_factory=list)
    redFlags: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    suspiciousPatterns: List[str] = Field(default_factory=list)
    citationIssues: str = ""
    detailedAnalysis: str = ""
    confidence: float = Field(default=50, ge=0, le=100)


class ModelAuthorshipAnalyzer:
    name = "model"

    def __init__(
        self,
        client: Optional[InferenceClient] = None,
        fallback: Optional[AuthorshipAnalyzer] = None,
        model: str = HF_ANALYSIS_MODEL,
    ):
        self.client = client or build_inference_client()
        self.fallback = fallback or RuleBasedAuthorshipAnalyzer()
        self.model = model

    def analyze(self, title: str, abstract: str, full_text: str) -> AuthorshipReport:
        try:
            logger.info("Sending authorship analysis request to model backend...")
            raw = ask_for_json(
                self.client,
                AUTHORSHIP_SYSTEM_PROMPT,
                build_authorship_prompt(title, abstract, full_text),
                model=self.model,
            )
            parsed = ModelAuthorshipResponse.model_validate(raw)
        except (AnalysisBackendError, ValidationError) as e:
            logger.warning(f"⚠️  Model authorship analysis unusable ({e}); falling back to rule-based")
            return self.fallback.analyze(title, abstract, full_text)

        likelihood = clamp(parsed.aiGeneratedLikelihood, 0, 100)
        report = AuthorshipReport(
            originalityScore=clamp(parsed.originalityScore, 0, 100),
            aiGeneratedLikelihood=likelihood,
            # Bands are recomputed so both analyzers agree on the verdict.
            aiDetectionVerdict=verdict_for_likelihood(likelihood),
            aiIndicators=parsed.aiIndicators,
            redFlags=parsed.redFlags,
            strengths=parsed.strengths,
            suspiciousPatterns=parsed.suspiciousPatterns,
            citationIssues=parsed.citationIssues,
            detailedAnalysis=parsed.detailedAnalysis,
            confidence=clamp(parsed.confidence, 0, 100),
            analyzer=self.name,
        )
        logger.info(f"✅ Model authorship: likelihood={report.aiGeneratedLikelihood}% originality={report.originalityScore}%")
        return report


def build_authorship_analyzer(use_model: bool) -> AuthorshipAnalyzer:
    if use_model:
        return ModelAuthorshipAnalyzer()
    return RuleBasedAuthorshipAnalyzer()
