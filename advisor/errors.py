class AdvisorError(Exception):
    """Base error for the search and analysis flow."""


class NoResultsError(AdvisorError):
    """The search provider returned no products."""


class AIAnalysisError(AdvisorError):
    """The LLM call failed or its answer could not be used."""
