"""Error taxonomy for the plagiarism pipeline."""


class PlagiarismCheckError(Exception):
    """Base class for every error raised by the checker."""


class InputError(PlagiarismCheckError):
    """Required submission text is missing or empty."""


class AnalysisBackendError(PlagiarismCheckError):
    """The model backend is unreachable, rate-limited or answered with garbage."""


class CorpusEntryError(PlagiarismCheckError):
    """A single corpus comparison failed."""

    def __init__(self, entry_id: str, message: str):
        super().__init__(f"corpus entry {entry_id}: {message}")
        self.entry_id = entry_id


class PipelineFailure(PlagiarismCheckError):
    """An unrecovered error stopped the pipeline; the check must be marked FAILED."""
