"""Error taxonomy shared by the relay service and the client."""

RATE_LIMIT_MESSAGE = "You've exceeded your request quota. Please wait a moment and try again."

# Markers the provider puts in rate-limit error messages
RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")


class StudioError(Exception):
    """Base class for all Image Studio errors."""

    code = "studio_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudioError):
    """Raised for invalid user input that never reaches the network."""

    code = "validation_error"
    status_code = 400


class InvalidRequestError(StudioError):
    """Raised when the relay receives a request it cannot dispatch."""

    code = "invalid_request"
    status_code = 400


class RateLimitedError(StudioError):
    """Raised when the provider quota has been exhausted."""

    code = "rate_limited"
    status_code = 429

    def __init__(self, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)


class UpstreamError(StudioError):
    """Raised for any other provider or network failure."""

    code = "upstream_error"
    status_code = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class MissingCredentialError(StudioError):
    """Raised at relay startup when the provider API key is not configured."""

    code = "missing_credential"


class StorageError(StudioError):
    """Raised when persisted client state cannot be written."""

    code = "storage_error"


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the storage quota."""

    code = "storage_quota_exceeded"


class HistoryDecodeError(StorageError):
    """Raised when the persisted history cannot be decoded."""

    code = "history_decode_error"


def is_rate_limit_failure(error: BaseException) -> bool:
    """
    Check whether an error represents a provider rate limit.

    Structured RateLimitedError instances are recognised directly; anything
    else falls back to looking for the provider's markers in the message.
    """
    if isinstance(error, RateLimitedError):
        return True

    message = str(error)
    if RATE_LIMIT_MESSAGE in message:
        return True
    return any(marker in message for marker in RATE_LIMIT_MARKERS)
