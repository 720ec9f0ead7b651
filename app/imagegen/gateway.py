"""
nodeBrain gateway client.
Expands a short topic into a detailed image prompt with one chat completion.

Required Environment Variables:
    GATEWAY_API_KEY: nodeBrain gateway key
    GATEWAY_BASE_URL: Gateway base URL (default: https://nodes.ivanovskii.com)
    GATEWAY_MODEL: Chat model (default: gemini-3-flash)
    GATEWAY_MAX_OUTPUT_TOKENS: Output ceiling for the expansion (default: 200)
"""
import logging
import os
from typing import Dict, List

import requests

from .errors import ConfigurationError, UpstreamExpansionError

logger = logging.getLogger(__name__)

SYSTEM_TEMPLATE = (
    "You are an expert at creating image generation prompts. Given a topic, create a "
    "detailed, evocative prompt. Be specific about composition, lighting, mood, colors, "
    "and details. Keep it under 100 words. Do not include any markdown, links, citations, "
    "or explanations - output ONLY the pure prompt text. Style: {style}"
)
USER_TEMPLATE = 'Create an image prompt for: "{topic}"'


def build_messages(topic: str, style_descriptor: str) -> List[Dict[str, str]]:
    """Build the system + user message pair sent to the gateway."""
    # Topic and descriptor may contain braces
    return [
        {"role": "system", "content": SYSTEM_TEMPLATE.replace("{style}", style_descriptor)},
        {"role": "user", "content": USER_TEMPLATE.replace("{topic}", topic)},
    ]


class GatewayClient:
    """Chat-completion client for the nodeBrain LLM gateway."""

    ENV_API_KEY = "GATEWAY_API_KEY"
    ENV_BASE_URL = "GATEWAY_BASE_URL"
    ENV_MODEL = "GATEWAY_MODEL"
    ENV_MAX_TOKENS = "GATEWAY_MAX_OUTPUT_TOKENS"

    DEFAULT_BASE_URL = "https://nodes.ivanovskii.com"
    DEFAULT_MODEL = "gemini-3-flash"
    DEFAULT_MAX_TOKENS = 200
    TEMPERATURE = 0.8
    TIMEOUT = 60

    def __init__(self):
        self.api_key = os.getenv(self.ENV_API_KEY)
        self.base_url = os.getenv(self.ENV_BASE_URL, self.DEFAULT_BASE_URL).rstrip("/")
        self.model = os.getenv(self.ENV_MODEL, self.DEFAULT_MODEL)
        try:
            self.max_tokens = int(os.getenv(self.ENV_MAX_TOKENS, self.DEFAULT_MAX_TOKENS))
        except ValueError:
            raise ConfigurationError(f"{self.ENV_MAX_TOKENS} must be an integer")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_missing_config(self) -> list:
        return [] if self.api_key else [self.ENV_API_KEY]

    @property
    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json", "X-API-Key": self.api_key}

    def expand(self, topic: str, style_descriptor: str) -> str:
        """
        Expand the topic into an image prompt.

        Args:
            topic: User supplied subject, embedded verbatim
            style_descriptor: Style text from the catalog

        Returns:
            Prompt text exactly as the gateway returned it

        Raises:
            ConfigurationError: no gateway key
            UpstreamExpansionError: non-2xx status, transport failure, or no content
        """
        if not self.is_configured():
            raise ConfigurationError("Gateway API key not configured")

        payload = {
            "messages": build_messages(topic, style_descriptor),
            "model": self.model,
            "temperature": self.TEMPERATURE,
            "maxOutputTokens": self.max_tokens,
        }

        logger.info(f"Expanding topic via gateway model {self.model}")
        try:
            response = requests.post(
                f"{self.base_url}/api/gateway/llm/chat/complete",
                headers=self.headers,
                json=payload,
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Gateway transport error: {e}")
            raise UpstreamExpansionError(502, str(e))

        if not response.ok:
            logger.error(f"nodeBrain error: {response.status_code} {response.text}")
            raise UpstreamExpansionError(response.status_code, response.text)

        try:
            content = response.json().get("content")
        except (ValueError, AttributeError):
            content = None
        if not isinstance(content, str) or not content:
            raise UpstreamExpansionError(502, "Gateway response did not contain prompt content")

        return content

    def list_models(self) -> List[str]:
        """Return model ids available on the gateway. Raises on any failure."""
        response = requests.get(
            f"{self.base_url}/api/gateway/llm/models",
            headers={"X-API-Key": self.api_key},
            timeout=10,
        )
        response.raise_for_status()
        models = response.json()
        if isinstance(models, dict):
            models = models.get("data") or models.get("models") or []
        return [m["id"] if isinstance(m, dict) else str(m) for m in models]
