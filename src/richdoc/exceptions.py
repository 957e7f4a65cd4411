"""Custom exceptions for richdoc."""


class RichdocError(Exception):
    """Base exception for richdoc operations."""


class ConfigurationError(RichdocError):
    """Content store credentials or settings are missing."""


class FetchError(RichdocError):
    """Error during content fetching."""


class ArticleNotFoundError(FetchError):
    """Article or its category does not exist in the content store."""


class RateLimitError(FetchError):
    """Rate limited by the content store."""


class DocumentParseError(RichdocError):
    """Payload is not a rich-text document."""
