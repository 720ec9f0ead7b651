"""
Google Imagen generator.
Renders synchronously and returns the image inline as base64.

Required Environment Variables:
    GOOGLE_AI_API_KEY: Google AI Studio API key
"""
import logging
import os
from typing import List

import requests

from ..errors import ProviderError
from .base import BaseGenerator, Failure, InlineImage, ProviderResult, Success, error_reason

logger = logging.getLogger(__name__)


class GeminiGenerator(BaseGenerator):
    """Google Imagen 4 via the Generative Language predict endpoint."""

    name = "gemini"

    ENV_API_KEY = "GOOGLE_AI_API_KEY"

    API_URL = "https://generativelanguage.googleapis.com/v1beta"
    MODEL = "imagen-4.0-generate-001"
    DEFAULT_MIME_TYPE = "image/png"

    def __init__(self):
        self.api_key = os.getenv(self.ENV_API_KEY)

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_missing_config(self) -> List[str]:
        return [] if self.api_key else [self.ENV_API_KEY]

    def _generate(self, prompt: str) -> ProviderResult:
        url = f"{self.API_URL}/models/{self.MODEL}:predict"
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": "3:4",
                "personGeneration": "allow_adult",
            },
        }

        logger.info(f"Submitting Imagen request ({self.MODEL})...")
        response = requests.post(
            url,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=self.TIMEOUT,
        )

        if not response.ok:
            logger.error(f"Imagen API Error: status {response.status_code}")
            return Failure(error_reason(response, "Gemini generation failed"))

        try:
            predictions = response.json().get("predictions") or []
        except (ValueError, AttributeError):
            raise ProviderError(self.name, "Gemini returned an unreadable response")

        if not predictions or not isinstance(predictions[0], dict) or not predictions[0].get("bytesBase64Encoded"):
            # Imagen drops filtered samples instead of returning an error
            raise ProviderError(self.name, "Gemini generation failed")

        prediction = predictions[0]
        mime_type = prediction.get("mimeType") or self.DEFAULT_MIME_TYPE
        return Success(InlineImage(f"data:{mime_type};base64,{prediction['bytesBase64Encoded']}"))

    def check_connection(self) -> bool:
        if not self.is_configured():
            return False
        try:
            response = requests.get(
                f"{self.API_URL}/models",
                params={"key": self.api_key},
                timeout=10,
            )
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.warning(f"Imagen connectivity check failed: {e}")
            return False
