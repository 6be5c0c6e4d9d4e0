import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from projectcheck.config import (
    COMPARISON_PREFIX_CHARS,
    CORPUS_MATCH_FLOOR,
    MAX_MATCHED_SECTIONS,
    CheckConfig,
)
from projectcheck.errors import AnalysisBackendError, CorpusEntryError
from projectcheck.schemas.analysis_schemas import CorpusResult, EntryComparison
from projectcheck.schemas.plagiarism_schemas import SimilarityMatch
from projectcheck.schemas.submission_schemas import CorpusEntry, Submission
from projectcheck.utils.lexical_utils import matching_sentences, similarity
from projectcheck.utils.semantic_utils import (
    calculate_semantic_similarity,
    find_semantic_matches,
)

logger = logging.getLogger("projectcheck.corpus")


class EntryComparer(Protocol):
    name: str

    def compare(self, text: str, entry: CorpusEntry) -> EntryComparison:
        ...


class LexicalComparer:
    """Free comparison: token-set overlap plus fuzzy sentence alignment."""

    name = "lexical"

    def compare(self, text: str, entry: CorpusEntry) -> EntryComparison:
        score = similarity(text, entry.fullText)
        sections = matching_sentences(text, entry.fullText)
        return EntryComparison(
            similarityScore=score,
            matchedSections=sections,
            analysis=(
                f"Token overlap of {score:.0f}% with \"{entry.title}\"; "
                f"{len(sections)} near-identical sentence(s) found."
            ),
        )


class SemanticComparer:
    """
    Embedding comparison over a bounded prefix of both texts. Falls back to the
    lexical comparer when the encoder cannot be loaded or fails.
    """

    name = "semantic"

    def __init__(self, fallback: Optional[EntryComparer] = None, prefix_chars: int = COMPARISON_PREFIX_CHARS):
        self.fallback = fallback or LexicalComparer()
        self.prefix_chars = prefix_chars

    def compare(self, text: str, entry: CorpusEntry) -> EntryComparison:
        head_a = text[: self.prefix_chars]
        head_b = entry.fullText[: self.prefix_chars]
        try:
            cosine = calculate_semantic_similarity(head_a, head_b)
            pairs = find_semantic_matches(head_a, head_b)
        except AnalysisBackendError as e:
            logger.warning(f"⚠️  Semantic comparison unavailable ({e}), using lexical comparison")
            return self.fallback.compare(text, entry)

        lexical = similarity(text, entry.fullText)
        # Verbatim copies always score 100 whatever the embedding says.
        score = max(round(cosine * 100.0, 1), lexical)
        sections = [p["doc_text"] for p in pairs][:MAX_MATCHED_SECTIONS]
        return EntryComparison(
            similarityScore=min(100.0, score),
            matchedSections=sections,
            analysis=(
                f"Semantic similarity {cosine * 100:.0f}% and token overlap {lexical:.0f}% "
                f"with \"{entry.title}\"; {len(pairs)} paraphrased or copied sentence(s)."
            ),
        )


class CorpusComparator:
    """
    Compares a submission against a bounded slice of the accepted corpus.
    One failed or slow comparison never aborts the batch.
    """

    def __init__(self, comparer: Optional[EntryComparer] = None, config: Optional[CheckConfig] = None):
        self.comparer = comparer or LexicalComparer()
        self.config = config or CheckConfig()

    def select_entries(
        self,
        submission: Submission,
        corpus: Sequence[CorpusEntry],
        exclude_submitter_id: Optional[str] = None,
    ) -> List[CorpusEntry]:
        excluded = {submission.submitterId}
        if exclude_submitter_id:
            excluded.add(exclude_submitter_id)
        eligible = [e for e in corpus if e.submitterId not in excluded]
        return eligible[: self.config.corpusScanLimit]

    async def _compare_entry(
        self,
        submission: Submission,
        entry: CorpusEntry,
        semaphore: asyncio.Semaphore,
    ) -> Tuple[Optional[SimilarityMatch], bool]:
        timeout = self.config.comparisonTimeoutMs / 1000
        async with semaphore:
            try:
                if not entry.fullText or not entry.fullText.strip():
                    raise CorpusEntryError(entry.id, "entry has no text")
                result = await asyncio.wait_for(
                    asyncio.to_thread(self.comparer.compare, submission.fullText, entry),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"⏱️  {CorpusEntryError(entry.id, f'comparison timed out after {timeout:.1f}s')}")
                return None, True
            except CorpusEntryError as e:
                logger.warning(f"Skipping {e}")
                return None, True
            except Exception as e:
                logger.warning(f"Skipping {CorpusEntryError(entry.id, str(e))}", exc_info=True)
                return None, True

        logger.debug(f"   Entry {entry.id}: {result.similarityScore:.1f}% ({self.comparer.name})")
        if result.similarityScore < CORPUS_MATCH_FLOOR:
            return None, False

        return SimilarityMatch(
            entryId=entry.id,
            entryTitle=entry.title,
            submitterName=entry.submitterName or "Unknown",
            similarity=round(result.similarityScore, 1),
            matchedSections=result.matchedSections,
            analysis=result.analysis,
        ), False

    async def compare_against_corpus(
        self,
        submission: Submission,
        corpus: Sequence[CorpusEntry],
        exclude_submitter_id: Optional[str] = None,
    ) -> CorpusResult:
        entries = self.select_entries(submission, corpus, exclude_submitter_id)
        if not entries:
            logger.info("No eligible corpus entries to compare against")
            return CorpusResult()

        logger.info(f"🔍 Comparing against {len(entries)} corpus entries ({self.comparer.name})")
        semaphore = asyncio.Semaphore(self.config.maxConcurrentComparisons)
        outcomes = await asyncio.gather(
            *(self._compare_entry(submission, entry, semaphore) for entry in entries)
        )

        matches = [match for match, _ in outcomes if match is not None]
        skipped = sum(1 for _, failed in outcomes if failed)
        matches.sort(key=lambda m: m.similarity, reverse=True)

        logger.info(f"✅ Corpus comparison done: {len(matches)} match(es), {skipped} skipped")
        return CorpusResult(
            matches=matches,
            highestSimilarity=matches[0].similarity if matches else 0.0,
            checkedEntries=len(entries) - skipped,
            skippedEntries=skipped,
        )


def build_comparer(config: CheckConfig) -> EntryComparer:
    if config.useModelAnalysis:
        return SemanticComparer()
    return LexicalComparer()
