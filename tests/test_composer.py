"""Tests for the response body produced for callers."""

import pytest

from app.imagegen.clients import Failure, InlineImage, PendingJob, RemoteImage, Success, Unavailable
from app.imagegen.composer import compose_image_response, compose_prompt_response, provider_fields
from app.imagegen.orchestrator import AggregateResult


@pytest.mark.parametrize("result, expected", [
    (Success(InlineImage("data:image/png;base64,AAA")), {"imageData": "data:image/png;base64,AAA"}),
    (Success(RemoteImage("https://cdn.test/x.png")), {"imageUrl": "https://cdn.test/x.png"}),
    (Success(PendingJob("pred-1", "starting")), {"predictionId": "pred-1", "status": "starting"}),
    (Failure("quota exceeded"), {"error": "quota exceeded"}),
    (Unavailable(), {"error": "not configured", "configured": False}),
])
def test_provider_fields(result, expected):
    assert provider_fields(result) == expected


def test_provider_fields_rejects_unknown_result():
    with pytest.raises(TypeError):
        provider_fields("not a result")


def test_prompt_only_response():
    assert compose_prompt_response("a quiet harbor at dawn", "illustration", "Soft gouache harbor", True) == {
        "success": True,
        "imagePrompt": "Soft gouache harbor",
        "style": "illustration",
        "originalTopic": "a quiet harbor at dawn",
        "imageGenerationAvailable": True,
    }


def test_multi_provider_response_keeps_each_shape():
    aggregate = AggregateResult(
        expanded_prompt="Soft gouache harbor",
        results={
            "gemini": Failure("Prompt blocked"),
            "bytedance": Success(RemoteImage("https://cdn.test/b.png")),
        },
        legacy_image="https://cdn.test/b.png",
        ready=False,
    )

    body = compose_image_response("harbor", "photo", aggregate, True)

    assert body["success"] is True
    assert body["imagePrompt"] == "Soft gouache harbor"
    assert body["gemini"] == {"error": "Prompt blocked"}
    assert body["bytedance"] == {"imageUrl": "https://cdn.test/b.png"}
    assert body["imageData"] == "https://cdn.test/b.png"
    assert body["imageGenerationReady"] is False
    assert "imageUrl" not in body
    assert "imageError" not in body


def test_all_failed_has_no_legacy_field():
    aggregate = AggregateResult(
        expanded_prompt="p",
        results={"gemini": Unavailable(), "bytedance": Failure("credits")},
    )
    body = compose_image_response("t", "photo", aggregate, False)
    assert "imageData" not in body
    assert body["imagePrompt"] == "p"
    assert body["imageGenerationAvailable"] is False


def test_single_provider_fields_are_flattened():
    aggregate = AggregateResult(
        expanded_prompt="p",
        results={"replicate": Success(PendingJob("pred-9", "processing"))},
        ready=True,
    )
    body = compose_image_response("t", "3d", aggregate, True)
    assert body["replicate"] == {"predictionId": "pred-9", "status": "processing"}
    assert body["predictionId"] == "pred-9"
    assert body["status"] == "processing"
    assert "imageData" not in body


def test_single_provider_failure_is_flattened_as_image_error():
    aggregate = AggregateResult(expanded_prompt="p", results={"gemini": Unavailable()})
    body = compose_image_response("t", "photo", aggregate, False)
    assert body["imageError"] == "not configured"
    assert "error" not in body
    assert "configured" not in body
