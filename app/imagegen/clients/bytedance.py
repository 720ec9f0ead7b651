"""
ByteDance Seedream generator, reached through the nodeBrain gateway.
Returns a URL to the rendered image.

Required Environment Variables:
    GATEWAY_API_KEY: nodeBrain gateway key (shared with prompt expansion)
    GATEWAY_BASE_URL: Gateway base URL (default: https://nodes.ivanovskii.com)
"""
import logging
import os
from typing import List

import requests

from ..errors import ProviderError
from .base import BaseGenerator, Failure, ProviderResult, RemoteImage, Success, error_reason

logger = logging.getLogger(__name__)


class ByteDanceGenerator(BaseGenerator):
    """Seedream 4.5 via the gateway image endpoint."""

    name = "bytedance"

    ENV_API_KEY = "GATEWAY_API_KEY"
    ENV_BASE_URL = "GATEWAY_BASE_URL"

    DEFAULT_BASE_URL = "https://nodes.ivanovskii.com"
    MODEL = "bytedance_v4_5_create"

    def __init__(self):
        self.api_key = os.getenv(self.ENV_API_KEY)
        self.base_url = os.getenv(self.ENV_BASE_URL, self.DEFAULT_BASE_URL).rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_missing_config(self) -> List[str]:
        return [] if self.api_key else [self.ENV_API_KEY]

    def _generate(self, prompt: str) -> ProviderResult:
        payload = {
            "prompt": prompt,
            "model": self.MODEL,
            "ratio": "portrait",
            "size": "M",
            "num_images": 1,
        }

        logger.info(f"Submitting Seedream request ({self.MODEL})...")
        response = requests.post(
            f"{self.base_url}/api/gateway/image/generate",
            headers={"Content-Type": "application/json", "X-API-Key": self.api_key},
            json=payload,
            timeout=self.TIMEOUT,
        )

        if not response.ok:
            logger.error(f"Seedream API Error: status {response.status_code}")
            return Failure(error_reason(response, "ByteDance generation failed"))

        try:
            data = response.json()
        except ValueError:
            raise ProviderError(self.name, "ByteDance generation failed")
        if not isinstance(data, dict):
            raise ProviderError(self.name, "ByteDance generation failed")

        images = data.get("images") or []
        if not data.get("success") or not images or not isinstance(images[0], dict) or not images[0].get("url"):
            return Failure(error_reason(response, "ByteDance generation failed"))

        return Success(RemoteImage(images[0]["url"]))

    def check_connection(self) -> bool:
        # Same gateway as prompt expansion, so the models listing doubles as the connectivity check
        if not self.is_configured():
            return False
        try:
            response = requests.get(
                f"{self.base_url}/api/gateway/llm/models",
                headers={"X-API-Key": self.api_key},
                timeout=10,
            )
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.warning(f"Gateway connectivity check failed: {e}")
            return False
