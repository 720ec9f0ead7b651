import os
import logging
from fastapi import FastAPI, Depends, Request, Body
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
import uvicorn
from .imagegen import ImageGenService, GenerationRequest, build_status_report
from .imagegen.errors import ImageGenError
from .imagegen.styles import list_styles

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

app = FastAPI(
    title="Topic Image Generator",
    description="Expands a topic into an image prompt and renders it with several image providers",
    version="1.0.0"
)


def get_service() -> ImageGenService:
    """
    Build the pipeline from the current environment.
    """
    return ImageGenService()


def get_status_report() -> dict:
    """
    Status for the current environment. Never raises on bad configuration.
    """
    return build_status_report()


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(ImageGenError)
async def imagegen_error_handler(request: Request, exc: ImageGenError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_errors(exc)}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": "Method not allowed"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# =============================================================================
# Image Generation Endpoints
# =============================================================================

@app.options("/generate-image", tags=["ImageGen"])
def generate_image_preflight():
    """
    CORS preflight. Headers are added by the middleware.
    """
    return Response(status_code=200)


@app.post("/generate-image", tags=["ImageGen"])
async def generate_image(
    request: Optional[GenerationRequest] = Body(default=None),
    service: ImageGenService = Depends(get_service)
):
    """
    Expand a topic into an image prompt and optionally render it.

    With generateImage=true every enabled provider runs concurrently; provider
    failures are reported per provider and never change the 200 status.
    """
    try:
        return await service.generate(request or GenerationRequest())
    except ImageGenError:
        raise
    except Exception as e:
        logger.exception("Error generating image")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)}
        )


@app.get("/check-status", tags=["ImageGen"])
def check_status(report: dict = Depends(get_status_report)):
    """
    Configuration and live connectivity for the gateway and each provider.
    Always 200; configuration errors are reported in the body.
    """
    return report


@app.get("/styles", tags=["ImageGen"])
def get_styles():
    """
    List the styles a request may ask for.
    """
    styles = list_styles()
    return {
        "count": len(styles),
        "styles": styles
    }


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
