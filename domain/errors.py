"""Error taxonomy of the scoring core.

The HTTP layer maps these onto status codes in ``app.error_handlers``.
"""


class ScoringError(Exception):
    """Base class for every error raised by the scoring core."""


class MissingConfigurationError(ScoringError):
    """A required setting (API key, model) is absent at startup."""


class NotFoundError(ScoringError):
    pass


class CandidateNotFoundError(NotFoundError):
    def __init__(self, candidate_id: int):
        super().__init__(f"Candidate with id {candidate_id} not found")
        self.candidate_id = candidate_id


class ScoreNotFoundError(NotFoundError):
    def __init__(self, candidate_id: int):
        super().__init__(
            f"Candidate {candidate_id} does not have an existing score to update")
        self.candidate_id = candidate_id


class CvExtractionError(ScoringError):
    """CV could not be turned into text. Always recovered by the caller."""


class CvFetchError(CvExtractionError):
    pass


class CvParseError(CvExtractionError):
    pass


class EvaluationError(ScoringError):
    """The LLM call failed (network, timeout, non-2xx). Retryable by the caller."""


class ScoreValidationError(ScoringError):
    pass
