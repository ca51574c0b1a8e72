"""
Custom exceptions for the book summarizer.
Each stage of the upload pipeline raises its own type so failures can be told apart in logs.
"""

class PipelineError(Exception):
    """Base class for all pipeline exceptions."""
    pass


class ExtractionError(PipelineError):
    """Raised when the uploaded PDF cannot be read or has no text."""
    pass


class SummarizationError(PipelineError):
    """Raised when the LLM call for a chapter fails."""
    pass


class ResponseParsingError(SummarizationError):
    """Raised when the LLM response is not a well-formed chapter evaluation."""
    pass


class PersistenceError(PipelineError):
    """Raised when the summaries store is unreachable or rejects a write."""
    pass


class StartupConnectivityError(PersistenceError):
    """Raised when the summaries store cannot be reached at process start."""
    pass


class APIKeyError(PipelineError):
    """Raised when an API key is missing or invalid."""
    pass


class ConfigurationError(PipelineError):
    """Raised when there's an error with the pipeline configuration."""
    pass


class ValidationError(PipelineError):
    """Raised when input validation fails."""
    pass
