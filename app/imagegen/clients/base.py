"""
Base Generator class and result types for image providers.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

import requests

from ..errors import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InlineImage:
    """Base64 image artifact wrapped in a data URI."""
    data_uri: str


@dataclass(frozen=True)
class RemoteImage:
    """URL of an image rendered and hosted by the provider."""
    url: str


@dataclass(frozen=True)
class PendingJob:
    """Render accepted but not finished; poll the provider with the id."""
    prediction_id: str
    status: str


ImagePayload = Union[InlineImage, RemoteImage, PendingJob]


@dataclass(frozen=True)
class Success:
    payload: ImagePayload

    @property
    def image(self) -> Optional[str]:
        """Image reference usable as a legacy `imageData` value, if any."""
        if isinstance(self.payload, InlineImage):
            return self.payload.data_uri
        if isinstance(self.payload, RemoteImage):
            return self.payload.url
        return None


@dataclass(frozen=True)
class Failure:
    reason: str


@dataclass(frozen=True)
class Unavailable:
    reason: str = "not configured"


ProviderResult = Union[Success, Failure, Unavailable]


def error_reason(response: requests.Response, fallback: str) -> str:
    """
    Pull a human readable error out of a failed provider response.

    Handles `{"error": "..."}`, `{"error": {"message": "..."}}` and
    `{"detail": "..."}` bodies. Anything else, including bodies that are not
    JSON, yields the fallback.
    """
    try:
        body = response.json()
    except ValueError:
        return fallback

    if not isinstance(body, dict):
        return fallback

    error = body.get("error")
    if isinstance(error, dict):
        error = error.get("message")
    if not error:
        error = body.get("detail")
    return str(error) if error else fallback


class BaseGenerator:
    """Abstract base class for image generators."""

    name = "base"
    # Seconds to wait on a single provider call
    TIMEOUT = 120

    def is_configured(self) -> bool:
        raise NotImplementedError("Subclasses must implement is_configured")

    def get_missing_config(self) -> List[str]:
        """Return list of missing configuration variables."""
        return []

    def generate(self, prompt: str) -> ProviderResult:
        """
        Render the prompt, returning exactly one ProviderResult.

        Returns Unavailable without touching the network when credentials
        are missing; all other errors come back as Failure.
        """
        if not self.is_configured():
            logger.info(f"{self.name}: skipping, missing {', '.join(self.get_missing_config())}")
            return Unavailable()

        try:
            return self._generate(prompt)
        except ProviderError as e:
            logger.warning(f"{e.provider}: {e.reason}")
            return Failure(e.reason)
        except requests.exceptions.RequestException as e:
            logger.error(f"{self.name}: transport error: {e}")
            return Failure(str(e))

    def _generate(self, prompt: str) -> ProviderResult:
        """
        Issue the provider request.
        Must be implemented by subclasses.

        Args:
            prompt: Expanded image prompt, used verbatim

        Returns:
            Success or Failure
        """
        raise NotImplementedError("Subclasses must implement _generate")

    def check_connection(self) -> bool:
        """Check connectivity with a cheap authenticated request."""
        return False
