"""
Maps pipeline results onto the JSON returned to callers.
"""
from typing import Any, Dict, Optional

from .clients import Failure, InlineImage, PendingJob, ProviderResult, RemoteImage, Success, Unavailable
from .orchestrator import AggregateResult


def provider_fields(result: ProviderResult) -> Dict[str, Any]:
    """Wire fields for one provider's outcome."""
    if isinstance(result, Success):
        payload = result.payload
        if isinstance(payload, InlineImage):
            return {"imageData": payload.data_uri}
        if isinstance(payload, RemoteImage):
            return {"imageUrl": payload.url}
        if isinstance(payload, PendingJob):
            return {"predictionId": payload.prediction_id, "status": payload.status}
        raise TypeError(f"Unknown image payload: {payload!r}")
    if isinstance(result, Unavailable):
        return {"error": result.reason, "configured": False}
    if isinstance(result, Failure):
        return {"error": result.reason}
    raise TypeError(f"Unknown provider result: {result!r}")


def compose_prompt_response(
    topic: str,
    style: Optional[str],
    image_prompt: str,
    available: bool,
) -> Dict[str, Any]:
    return {
        "success": True,
        "imagePrompt": image_prompt,
        "style": style,
        "originalTopic": topic,
        "imageGenerationAvailable": available,
    }


def compose_image_response(
    topic: str,
    style: Optional[str],
    aggregate: AggregateResult,
    available: bool,
) -> Dict[str, Any]:
    """
    Build the response for a request that asked for images.

    Each provider gets its own sub-object. `imageData` is kept at the top
    level for clients that predate multiple providers. With a single provider
    its fields are also copied to the top level, failures as `imageError`.
    """
    body = compose_prompt_response(topic, style, aggregate.expanded_prompt, available)

    for name, result in aggregate.results.items():
        body[name] = provider_fields(result)

    if len(aggregate.results) == 1:
        (only,) = aggregate.results.values()
        fields = provider_fields(only)
        if "error" in fields:
            body["imageError"] = fields.pop("error")
            fields.pop("configured", None)
        body.update(fields)

    if aggregate.legacy_image:
        body["imageData"] = aggregate.legacy_image

    body["imageGenerationReady"] = aggregate.ready
    return body
