import re
from functools import lru_cache
from typing import List, Set

import nltk
from nltk.corpus import stopwords
from nltk.tokenize import RegexpTokenizer
from rapidfuzz import fuzz, process

from projectcheck.config import FUZZY_SECTION_THRESHOLD, MAX_MATCHED_SECTIONS

_word_tokenizer = RegexpTokenizer(r"[a-z][a-z'\-]*")

MAX_ALIGNED_SENTENCES = 200

nltk.download("stopwords", quiet=True)

# nltk's English list plus filler words common in project reports
STOP_WORDS = set(stopwords.words("english")) | {
    "also", "among", "another", "around", "based", "could", "every", "given", "however",
    "may", "might", "must", "several", "since", "still", "therefore", "thus", "upon",
    "us", "using", "various", "whether", "within", "without", "would",
}


def tokenize(text: str) -> List[str]:
    return (text or "").lower().split()


def _jaccard(a: Set[str], b: Set[str]) -> float:
    union = len(a | b)
    if not union:
        return 0.0
    return len(a & b) / union


def similarity(a: str, b: str) -> float:
    """
    Jaccard overlap of the distinct lowercase whitespace tokens of two texts,
    as a percentage. Paraphrase and reordering are not penalised, so callers
    must treat it as a coarse signal.
    """
    return round(100.0 * _jaccard(set(tokenize(a)), set(tokenize(b))), 2)


def word_tokens(text: str) -> List[str]:
    return _word_tokenizer.tokenize((text or "").lower())


def word_count(text: str) -> int:
    return len((text or "").split())


def split_into_sentences(text: str, min_chars: int = 10) -> List[str]:
    """Split on sentence terminators, dropping fragments of min_chars or fewer."""
    parts = re.split(r"[.!?]+", text or "")
    return [p.strip() for p in parts if len(p.strip()) > min_chars]


def split_into_paragraphs(text: str, min_chars: int = 30) -> List[str]:
    parts = re.split(r"\n\s*\n", text or "")
    return [p.strip() for p in parts if len(p.strip()) > min_chars]


@lru_cache(maxsize=1024)
def _term_regex(term: str) -> "re.Pattern[str]":
    # Terms may start or end with punctuation ("node.js", "c++"), so \b is not enough.
    return re.compile(r"(?<![\w-])" + re.escape(term.lower()) + r"(?:s|es)?(?![\w-])", re.IGNORECASE)


def count_term(text: str, term: str) -> int:
    """Whole-word, case-insensitive occurrences of term (simple plurals included)."""
    if not text or not term:
        return 0
    return len(_term_regex(term).findall(text))


def contains_term(text: str, term: str) -> bool:
    return count_term(text, term) > 0


def matching_sentences(
    text_a: str,
    text_b: str,
    threshold: int = FUZZY_SECTION_THRESHOLD,
    limit: int = MAX_MATCHED_SECTIONS,
) -> List[str]:
    """Sentences of text_a with a near-identical counterpart in text_b."""
    sents_a = [s for s in split_into_sentences(text_a) if word_count(s) >= 5][:MAX_ALIGNED_SENTENCES]
    sents_b = [s.lower() for s in split_into_sentences(text_b) if word_count(s) >= 5][:MAX_ALIGNED_SENTENCES]
    if not sents_a or not sents_b:
        return []

    matched: List[str] = []
    for sent in sents_a:
        best = process.extractOne(sent.lower(), sents_b, scorer=fuzz.ratio, score_cutoff=threshold)
        if best is not None and sent not in matched:
            matched.append(sent)
            if len(matched) >= limit:
                break
    return matched
