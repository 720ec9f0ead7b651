"""
Image Generation Service
Runs one request through expansion, optional fan-out and response composition.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from .composer import compose_image_response, compose_prompt_response
from .errors import ConfigurationError, ImageGenError, InvalidRequestError
from .gateway import GatewayClient
from .orchestrator import ImageOrchestrator
from .styles import DEFAULT_STYLE, resolve_style

logger = logging.getLogger(__name__)


class GenerationRequest(BaseModel):
    """Request body for /generate-image."""
    # Optional so a missing topic gets the stable 400 body, not a 422
    prompt: Optional[str] = Field(default=None, description="Short topic to turn into an image")
    style: Optional[str] = Field(default=DEFAULT_STYLE, description="photo, illustration, 3d or minimal")
    generateImage: bool = Field(default=False, description="Render images after expanding the prompt")

    class Config:
        json_schema_extra = {
            "example": {
                "prompt": "a quiet harbor at dawn",
                "style": "illustration",
                "generateImage": True
            }
        }


class ImageGenService:
    """
    Topic to image pipeline.

    Args:
        gateway: Prompt expansion client (defaults to env configuration)
        orchestrator: Image fan-out (defaults to env configuration)
    """

    def __init__(
        self,
        gateway: Optional[GatewayClient] = None,
        orchestrator: Optional[ImageOrchestrator] = None,
    ):
        self.gateway = gateway or GatewayClient()
        self.orchestrator = orchestrator or ImageOrchestrator()

    async def generate(self, request: GenerationRequest) -> Dict[str, Any]:
        """
        Expand the topic and, if asked, render it with every enabled provider.

        Raises:
            ConfigurationError: gateway key missing (checked before anything else)
            InvalidRequestError: empty topic
            UpstreamExpansionError: gateway refused or failed; no images are attempted
        """
        if not self.gateway.is_configured():
            raise ConfigurationError("Gateway API key not configured")

        if not request.prompt or not request.prompt.strip():
            raise InvalidRequestError("Prompt is required")

        style_descriptor = resolve_style(request.style)
        image_prompt = await run_in_threadpool(self.gateway.expand, request.prompt, style_descriptor)
        available = self.orchestrator.any_configured()

        if not request.generateImage:
            return compose_prompt_response(request.prompt, request.style, image_prompt, available)

        aggregate = await self.orchestrator.orchestrate(image_prompt)
        logger.info(
            f"Image stage done: ready={aggregate.ready}, "
            f"legacy={'yes' if aggregate.legacy_image else 'no'}"
        )
        return compose_image_response(request.prompt, request.style, aggregate, available)

    def check_status(self) -> Dict[str, Any]:
        """Report configuration and live connectivity for the gateway and providers."""
        status: Dict[str, Any] = {
            "apiKeyConfigured": self.gateway.is_configured(),
            "gatewayUrl": self.gateway.base_url,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "gatewayConnected": False,
        }

        if self.gateway.is_configured():
            try:
                status["availableModels"] = self.gateway.list_models()
                status["gatewayConnected"] = True
            except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
                logger.warning(f"Gateway status check failed: {e}")
                status["error"] = str(e)

        providers = {}
        for name, generator in self.orchestrator.generators.items():
            configured = generator.is_configured()
            providers[name] = {
                "configured": configured,
                "connected": configured and generator.check_connection(),
            }
        status["providers"] = providers

        status["imageGenerationReady"] = status["gatewayConnected"] and all(
            providers[name]["connected"] for name in self.orchestrator.ready_providers
        )
        return status


def misconfigured_status(error: ImageGenError) -> Dict[str, Any]:
    """Status body for a deployment whose settings could not be loaded."""
    return {
        "apiKeyConfigured": bool(os.getenv(GatewayClient.ENV_API_KEY)),
        "gatewayUrl": os.getenv(GatewayClient.ENV_BASE_URL, GatewayClient.DEFAULT_BASE_URL).rstrip("/"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "gatewayConnected": False,
        "providers": {},
        "imageGenerationReady": False,
        "error": error.message,
    }


def build_status_report() -> Dict[str, Any]:
    """Status for the current environment; configuration errors are reported, not raised."""
    try:
        service = ImageGenService()
    except ImageGenError as e:
        logger.error(f"Status check on misconfigured deployment: {e.message}")
        return misconfigured_status(e)
    return service.check_status()
