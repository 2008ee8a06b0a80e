"""
Exception types raised while handling a download request.
"""
from tokfetch.messages import DEFAULT_LANGUAGE, get_message


class TokFetchError(Exception):
    """Base class for all application errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(TokFetchError):
    """
    The submitted page URL is missing or not a supported platform link.
    Raised before any extraction runs; never counted in the stats.
    """

    def __init__(self, reason, language=DEFAULT_LANGUAGE):
        self.reason = reason
        key = 'url_required' if reason == 'missing' else 'invalid_url'
        super().__init__(get_message(key, language))


class ExtractionError(TokFetchError):
    """One extraction strategy failed. Logged, never shown to the caller."""


class DownloadError(TokFetchError):
    """Every extraction strategy failed for a request."""

    def __init__(self, language=DEFAULT_LANGUAGE):
        super().__init__(get_message('all_methods_failed', language))
