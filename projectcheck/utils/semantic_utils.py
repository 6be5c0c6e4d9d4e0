"""
Semantic comparison with MiniLM sentence embeddings.
Catches paraphrased copies that the token-overlap engine misses.
"""

import logging
import threading
from typing import Dict, List, Optional

import numpy as np

from projectcheck.config import SEMANTIC_MODEL_NAME, SEMANTIC_SECTION_THRESHOLD
from projectcheck.errors import AnalysisBackendError
from projectcheck.utils.lexical_utils import split_into_sentences, word_count

logger = logging.getLogger("projectcheck.semantic")

# Lazy load model to avoid multiple loads
_encoder_model = None
_encoder_error: Optional[str] = None
_encoder_lock = threading.Lock()


def get_encoder():
    """Lazy load the SentenceTransformer model; a failed load is not retried."""
    global _encoder_model, _encoder_error
    with _encoder_lock:
        if _encoder_error is not None:
            raise AnalysisBackendError(_encoder_error)
        if _encoder_model is None:
            logger.info(f"🔄 Loading SentenceTransformer {SEMANTIC_MODEL_NAME} model...")
            try:
                from sentence_transformers import SentenceTransformer
                _encoder_model = SentenceTransformer(SEMANTIC_MODEL_NAME)
            except Exception as e:
                _encoder_error = f"could not load {SEMANTIC_MODEL_NAME}: {e}"
                logger.error(f"❌ {_encoder_error}")
                raise AnalysisBackendError(_encoder_error) from e
            logger.info("✅ Model loaded successfully")
    return _encoder_model


def _cosine(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b) + 1e-8))


def _similarity_matrix(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    a = a / (np.linalg.norm(a, axis=1, keepdims=True) + 1e-8)
    b = b / (np.linalg.norm(b, axis=1, keepdims=True) + 1e-8)
    return a @ b.T


def _meaningful_sentences(text: str) -> List[str]:
    return [s for s in split_into_sentences(text, min_chars=20) if word_count(s) >= 5]


def _encode(encoder, texts: List[str]) -> np.ndarray:
    try:
        return encoder.encode(texts, convert_to_numpy=True, show_progress_bar=False)
    except (RuntimeError, ValueError) as e:
        raise AnalysisBackendError(f"encoding failed: {e}") from e


def calculate_semantic_similarity(text1: str, text2: str) -> float:
    """Cosine similarity (0-1) between the embeddings of two texts."""
    encoder = get_encoder()
    embeddings = _encode(encoder, [text1, text2])
    return max(0.0, min(1.0, _cosine(embeddings[0], embeddings[1])))


def find_semantic_matches(
    doc_text: str,
    source_text: str,
    threshold: float = SEMANTIC_SECTION_THRESHOLD,
) -> List[Dict]:
    """
    Pair each document sentence with its closest unused source sentence.
    Pairs below threshold are dropped; 0.75+ is a near copy, 0.5+ a paraphrase.
    """
    doc_sentences = _meaningful_sentences(doc_text)
    source_sentences = _meaningful_sentences(source_text)
    if not doc_sentences or not source_sentences:
        return []

    encoder = get_encoder()
    logger.debug(f"   Encoding {len(doc_sentences)} + {len(source_sentences)} sentences...")
    scores = _similarity_matrix(_encode(encoder, doc_sentences), _encode(encoder, source_sentences))

    matches: List[Dict] = []
    used = np.zeros(len(source_sentences), dtype=bool)
    for doc_idx, row in enumerate(scores):
        candidates = np.where(used, -1.0, row)
        src_idx = int(np.argmax(candidates))
        best = float(candidates[src_idx])
        if best < threshold:
            continue
        used[src_idx] = True
        matches.append({
            "doc_text": doc_sentences[doc_idx],
            "source_text": source_sentences[src_idx],
            "similarity": best,
            "doc_index": doc_idx,
            "source_index": src_idx,
        })

    logger.debug(f"   {len(matches)} semantic match(es) at threshold {threshold}")
    return matches
