"""
ImageGen Module
Topic to prompt to image pipeline integrated into the FastAPI app.
"""
from .service import GenerationRequest, ImageGenService, build_status_report
from .clients import get_generator, ProviderResult

__all__ = ["ImageGenService", "GenerationRequest", "build_status_report", "get_generator", "ProviderResult"]
