"""Exception classes for the expense Q&A pipeline."""


class ExpenseQAError(Exception):
    """Base exception for the expense Q&A pipeline."""
    pass


class ConfigError(ExpenseQAError):
    """Configuration-related errors."""
    pass


class ValidationError(ExpenseQAError):
    """Request validation errors (missing question or tenant id)."""
    pass


class NetworkError(ExpenseQAError):
    """Transport failure talking to the text generator or MongoDB."""
    pass


class RetryableNetworkError(NetworkError):
    """Network errors that can be retried (timeouts, 429, 5xx)."""
    pass


class LLMError(ExpenseQAError):
    """Text generator output could not be turned into a usable value."""
    pass


class NoCandidateError(LLMError):
    """Generator reply carried no candidates."""
    pass


class ExtractionError(LLMError):
    """No opening/closing brace or bracket found in the cleaned text."""
    pass


class ParseError(LLMError):
    """Bounded text is not parseable, even leniently."""
    pass


class NormalizationError(ParseError):
    """Parsed value is not a recognised Filter or Pipeline shape."""
    pass


class ExecutionError(ExpenseQAError):
    """MongoDB rejected the query or is not configured."""
    pass
