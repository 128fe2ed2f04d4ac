class DemocratError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(DemocratError):
    """Raised when a required setting (API key, URL) is missing."""


class RegistryError(DemocratError):
    """Raised when a DIP registry page cannot be fetched or decoded."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class TextExtractionError(DemocratError):
    """Raised when a PDF cannot be downloaded or parsed into text."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class EnrichmentError(DemocratError):
    """Raised when an AI enrichment stage cannot produce a usable result."""


class AIResponseError(EnrichmentError):
    """
    Raised when the model answers but the answer is unusable.

    Summaries and categorizations degrade to defaults instead of raising this;
    embeddings with the wrong shape do raise it.
    """


class VectorStoreError(DemocratError):
    """Raised when a Qdrant operation fails."""
