"""
Academic field inference from weighted keyword co-occurrence.

Title and abstract hits weigh three times as much as body hits. A domain is
only assigned when the leading weight clears DOMAIN_MIN_WEIGHT and its
margin over the runner-up gives at least DOMAIN_MIN_CONFIDENCE, otherwise the
verdict is "General", so one incidental "code" in a humanities paper never
turns on the tech-pattern checks downstream.
"""
import logging
from typing import Dict, List

from projectcheck.config import DOMAIN_MIN_CONFIDENCE, DOMAIN_MIN_WEIGHT
from projectcheck.schemas.analysis_schemas import DomainVerdict
from projectcheck.utils.lexical_utils import count_term

logger = logging.getLogger("projectcheck.domain")

GENERAL_DOMAIN = "General"
TITLE_WEIGHT = 3
BODY_WEIGHT = 1
MAX_CONFIDENCE = 95

DOMAIN_KEYWORDS: Dict[str, List[str]] = {
    "Computer Science": [
        "software", "algorithm", "programming", "database", "web application",
        "mobile application", "machine learning", "artificial intelligence", "neural network",
        "api", "frontend", "backend", "javascript", "python", "react", "node.js",
        "source code", "computer", "cybersecurity", "cloud computing", "deep learning",
    ],
    "Engineering": [
        "engineering", "circuit", "voltage", "microcontroller", "arduino", "sensor",
        "mechanical", "electrical", "civil", "structural", "prototype", "signal processing",
        "power system", "embedded system", "thermodynamic", "fabrication",
    ],
    "Business": [
        "business", "entrepreneur", "small business", "customer", "revenue", "profit",
        "marketing", "sales", "enterprise", "management", "stakeholder", "supply chain",
        "retail", "brand", "organization",
    ],
    "Economics": [
        "economic", "economy", "inflation", "gdp", "fiscal", "monetary", "unemployment",
        "trade", "exchange rate", "interest rate", "poverty", "macroeconomic",
    ],
    "Medicine": [
        "patient", "clinical", "disease", "hospital", "treatment", "diagnosis", "medical",
        "nursing", "symptom", "therapy", "health care", "healthcare", "mortality", "drug",
    ],
    "Education": [
        "student", "teacher", "curriculum", "classroom", "learning outcome", "pedagogy",
        "school", "academic performance", "instruction", "literacy",
    ],
    "Law": [
        "law", "legal", "court", "constitution", "legislation", "jurisdiction", "statute",
        "rights", "judiciary", "litigation",
    ],
    "Political Science": [
        "governance", "government", "policy", "election", "democracy", "political",
        "public administration", "corruption", "parliament",
    ],
    "Agriculture": [
        "agriculture", "crop", "farmer", "soil", "livestock", "irrigation", "yield",
        "fertilizer", "harvest",
    ],
    "Environmental Science": [
        "climate change", "environment", "pollution", "emission", "biodiversity",
        "sustainability", "renewable energy", "deforestation", "waste management",
    ],
    "Social Sciences": [
        "society", "community", "social media", "culture", "gender", "behaviour",
        "behavior", "perception", "youth", "religion",
    ],
}


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def domain_weights(title: str, abstract: str, full_text: str) -> Dict[str, int]:
    head = f"{title or ''} {abstract or ''}"
    body = full_text or ""
    weights: Dict[str, int] = {}
    for domain, keywords in DOMAIN_KEYWORDS.items():
        weights[domain] = sum(
            TITLE_WEIGHT * count_term(head, kw) + BODY_WEIGHT * count_term(body, kw)
            for kw in keywords
        )
    return weights


def classify_domain(title: str, abstract: str, full_text: str) -> DomainVerdict:
    weights = domain_weights(title, abstract, full_text)
    # sorted() is stable, so ties keep the table order
    ranked = sorted(weights.items(), key=lambda kv: kv[1], reverse=True)
    top_domain, top = ranked[0]
    runner_up, second = ranked[1] if len(ranked) > 1 else ("", 0)

    confidence = min(MAX_CONFIDENCE, _round_half_up(100 * top / (top + second + 1)))

    if top < DOMAIN_MIN_WEIGHT or confidence < DOMAIN_MIN_CONFIDENCE:
        logger.info(
            f"Domain inconclusive (leader={top_domain} weight={top}, confidence={confidence}%) -> General"
        )
        return DomainVerdict(
            domain=GENERAL_DOMAIN,
            confidence=confidence if top else 0,
            weight=top,
            runnerUp=runner_up,
            runnerUpWeight=second,
        )

    logger.info(f"Domain detected: {top_domain} (weight={top}, confidence={confidence}%)")
    return DomainVerdict(
        domain=top_domain,
        confidence=confidence,
        weight=top,
        runnerUp=runner_up,
        runnerUpWeight=second,
    )
