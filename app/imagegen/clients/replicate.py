"""
Replicate generator.
Creates a prediction and waits for it synchronously when the model finishes
within the `Prefer: wait` window; otherwise hands back the prediction id.

Required Environment Variables:
    REPLICATE_API_TOKEN: Replicate API token
    REPLICATE_MODEL: Model slug (default: black-forest-labs/flux-schnell)
"""
import logging
import os
from typing import List

import requests

from ..errors import ProviderError
from .base import (
    BaseGenerator,
    Failure,
    PendingJob,
    ProviderResult,
    RemoteImage,
    Success,
    error_reason,
)

logger = logging.getLogger(__name__)


class ReplicateGenerator(BaseGenerator):
    """Replicate predictions API."""

    name = "replicate"

    ENV_API_TOKEN = "REPLICATE_API_TOKEN"
    ENV_MODEL = "REPLICATE_MODEL"

    API_URL = "https://api.replicate.com/v1"
    DEFAULT_MODEL = "black-forest-labs/flux-schnell"

    PENDING_STATUSES = {"starting", "processing"}
    FAILED_STATUSES = {"failed", "canceled"}

    def __init__(self):
        self.api_token = os.getenv(self.ENV_API_TOKEN)
        self.model = os.getenv(self.ENV_MODEL, self.DEFAULT_MODEL)

    def is_configured(self) -> bool:
        return bool(self.api_token)

    def get_missing_config(self) -> List[str]:
        return [] if self.api_token else [self.ENV_API_TOKEN]

    def _generate(self, prompt: str) -> ProviderResult:
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Prefer": "wait",
        }
        payload = {"input": {"prompt": prompt, "aspect_ratio": "3:4"}}

        logger.info(f"Submitting Replicate prediction ({self.model})...")
        response = requests.post(
            f"{self.API_URL}/models/{self.model}/predictions",
            headers=headers,
            json=payload,
            timeout=self.TIMEOUT,
        )

        if not response.ok:
            logger.error(f"Replicate API Error: status {response.status_code}")
            return Failure(error_reason(response, "Replicate generation failed"))

        try:
            prediction = response.json()
        except ValueError:
            raise ProviderError(self.name, "Replicate returned an unreadable response")
        if not isinstance(prediction, dict):
            raise ProviderError(self.name, "Replicate returned an unreadable response")

        status = prediction.get("status")
        if status in self.FAILED_STATUSES:
            return Failure(str(prediction.get("error") or f"Replicate prediction {status}"))

        if status == "succeeded":
            output = prediction.get("output")
            # Image models return either a single URL or a list of them
            if isinstance(output, list):
                output = output[0] if output else None
            if not output or not isinstance(output, str):
                raise ProviderError(self.name, "Replicate prediction returned no output")
            return Success(RemoteImage(output))

        if status in self.PENDING_STATUSES and prediction.get("id"):
            logger.info(f"Replicate prediction {prediction['id']} still {status}")
            return Success(PendingJob(prediction["id"], status))

        raise ProviderError(self.name, f"Unexpected Replicate status: {status}")

    def check_connection(self) -> bool:
        if not self.is_configured():
            return False
        try:
            response = requests.get(
                f"{self.API_URL}/account",
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=10,
            )
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.warning(f"Replicate connectivity check failed: {e}")
            return False
