"""
HTTP surface: POST /api/generate.

Run with:
    wrongway serve
    # or
    uvicorn --factory wrongway.api.app:create_app --port 8000
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from wrongway.api.responses import CLIENT_FAULT, assemble_error, assemble_success
from wrongway.common.config import Settings, load_settings
from wrongway.common.logging import get_logger
from wrongway.errors import JokeServiceError
from wrongway.generation.pipeline import JokePipeline


class GenerateRequest(BaseModel):
    params: Optional[Dict[str, Any]] = None


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[JokePipeline] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Settings and pipeline are loaded once here and shared read-only by all
    requests.
    """
    if pipeline is not None:
        settings = pipeline.settings
    elif settings is None:
        settings = load_settings()

    get_logger("wrongway", settings.log_level)
    logger = logging.getLogger(__name__)
    pipeline = pipeline or JokePipeline(settings)

    app = FastAPI(title="wrongway-jokes")
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def malformed_body(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=CLIENT_FAULT, content={"error": "Malformed request body"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.post("/api/generate")
    def generate(body: GenerateRequest):
        try:
            artifact = app.state.pipeline.run(body.params)
            status, content = assemble_success(artifact)
        except JokeServiceError as e:
            status, content = assemble_error(e)
        except Exception as e:
            logger.exception(f"Server error: {e}")
            status, content = assemble_error(e)
        return JSONResponse(status_code=status, content=content)

    return app
