"""
Generate Image Azure Function
HTTP-Triggered function exposing the same contract as POST /generate-image.
"""
import azure.functions as func
import json
import logging

from pydantic import ValidationError

from app.imagegen import ImageGenService, GenerationRequest
from app.imagegen.errors import ImageGenError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _json_response(body: dict, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json",
        headers=CORS_HEADERS
    )


async def main(req: func.HttpRequest) -> func.HttpResponse:
    """
    HTTP Trigger handler for image generation.

    Expected JSON body:
    {
        "prompt": "a quiet harbor at dawn",
        "style": "illustration",
        "generateImage": true
    }
    """
    logger.info(f"Generate image function triggered ({req.method}).")

    if req.method == "OPTIONS":
        return func.HttpResponse(status_code=200, headers=CORS_HEADERS)

    if req.method != "POST":
        return _json_response({"error": "Method not allowed"}, 405)

    try:
        body = req.get_json() if req.get_body() else {}
        request = GenerationRequest(**(body or {}))
    except (ValueError, TypeError, ValidationError) as e:
        return _json_response({"error": "Invalid request body", "details": str(e)}, 400)

    try:
        result = await ImageGenService().generate(request)
    except ImageGenError as e:
        return _json_response(e.to_dict(), e.status_code)
    except Exception as e:
        logger.error(f"Critical error: {e}")
        return _json_response({"error": "Internal server error", "message": str(e)}, 500)

    return _json_response(result, 200)
