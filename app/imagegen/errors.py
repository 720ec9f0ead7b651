"""
Error types for the image generation pipeline.
"""


class ImageGenError(Exception):
    """Base class for pipeline errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ConfigurationError(ImageGenError):
    """A required credential or setting is missing."""

    status_code = 500


class InvalidRequestError(ImageGenError):
    """The caller sent an unusable request (e.g. no topic)."""

    status_code = 400


class UpstreamExpansionError(ImageGenError):
    """The language-model gateway failed to expand the topic."""

    def __init__(self, status_code: int, details: str, message: str = "Failed to generate prompt"):
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}


class ProviderError(ImageGenError):
    """An image backend returned an error or malformed data.

    Never reaches the HTTP layer: adapters turn it into a Failure result.
    """

    def __init__(self, provider: str, reason: str):
        super().__init__(reason)
        self.provider = provider
        self.reason = reason
