"""
Image generator clients.
"""
from .base import (
    BaseGenerator,
    Failure,
    InlineImage,
    PendingJob,
    ProviderResult,
    RemoteImage,
    Success,
    Unavailable,
)
from .bytedance import ByteDanceGenerator
from .gemini import GeminiGenerator
from .replicate import ReplicateGenerator

# Order consulted when picking the single legacy `imageData` value
PROVIDER_PRECEDENCE = ("gemini", "bytedance", "replicate")

GENERATORS = {
    "gemini": GeminiGenerator,
    "bytedance": ByteDanceGenerator,
    "replicate": ReplicateGenerator,
}


def get_generator(provider: str) -> BaseGenerator:
    """
    Factory function to get the appropriate generator.

    Args:
        provider: 'gemini', 'bytedance' or 'replicate'

    Returns:
        BaseGenerator instance
    """
    provider = provider.strip().lower()
    if provider not in GENERATORS:
        raise ValueError(f"Unknown provider: {provider}. Use one of: {', '.join(PROVIDER_PRECEDENCE)}.")
    return GENERATORS[provider]()


__all__ = [
    "PROVIDER_PRECEDENCE",
    "get_generator",
    "BaseGenerator",
    "ProviderResult",
    "Success",
    "Failure",
    "Unavailable",
    "InlineImage",
    "RemoteImage",
    "PendingJob",
    "GeminiGenerator",
    "ByteDanceGenerator",
    "ReplicateGenerator",
]
