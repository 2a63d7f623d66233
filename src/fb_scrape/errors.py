from typing import Optional


class FbScrapeError(Exception):
    """Base class for errors raised by fb_scrape."""


class MissingCredentialError(FbScrapeError):
    def __init__(self, message: str = "You must specify a Facebook Graph API access token in ACCESS_TOKEN."):
        super().__init__(message)


class RemoteError(FbScrapeError):
    """
    The Graph API answered with an error object or a non-success status.
    str(err) is "<type> - <message>", the text rate limiting is detected on.
    """

    def __init__(self, error_type: str, message: str, status_code: Optional[int] = None):
        self.error_type = error_type
        self.message = message
        self.status_code = status_code
        super().__init__(f"{error_type} - {message}")


class RateLimitError(RemoteError):
    """A RemoteError whose text mentions a limit; retried after a back-off."""


class NormalizationError(ValueError, FbScrapeError):
    def __init__(self, value, reason: str = ""):
        self.value = value
        msg = f"cannot normalize {value!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


def is_rate_limit_text(text: str) -> bool:
    return "limit" in (text or "").lower()
