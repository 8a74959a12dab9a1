# ruff: noqa: B008

import logging

from character_extractor import __version__
from components.extraction_service.main import ExtractionService
from components.extraction_service.models import (
    ExtractionRequest,
    ExtractionResponse,
    HealthResponse,
    SplitAndEmbedRequest,
    SplitAndEmbedResponse,
)
from fastapi import Depends, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from shared.errors import TransportError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

EXTRACT_PATHS = ("/extract", "/api/extractcharacters")
SPLIT_AND_EMBED_PATHS = ("/splitandembed", "/api/splitandembed")
REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(service: ExtractionService) -> FastAPI:
    """
    Creates and configures the FastAPI application, registering all routes.
    This function returns the app object but does not run it.

    Failures inside the pipeline come back as HTTP 200 with an ``error``
    field; only transport problems (bad method, malformed body) use HTTP
    error codes.

    Args:
        service: The fully initialized ExtractionService instance.

    Returns:
        The configured FastAPI app instance.
    """
    app = FastAPI(title="Character Extractor API", version=__version__)

    def get_service() -> ExtractionService:
        return service

    async def extract_characters(
        request: ExtractionRequest, svc: ExtractionService = Depends(get_service)
    ) -> ExtractionResponse:
        return await svc.extract_characters(request)

    async def split_and_embed(
        request: SplitAndEmbedRequest, svc: ExtractionService = Depends(get_service)
    ) -> SplitAndEmbedResponse:
        return await svc.split_and_embed(request)

    @app.exception_handler(RequestValidationError)
    async def reject_malformed_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = TransportError(
            "The request body is malformed.", detail=f"{len(exc.errors())} problems"
        )
        logger.warning(
            f"Rejected {request.method} {request.url.path} [{error.stage}]: {error}"
        )
        return JSONResponse(
            status_code=422, content={"detail": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(StarletteHTTPException)
    async def empty_method_not_allowed(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        # Methods without an explicit route (e.g. TRACE) still get an empty 405.
        if exc.status_code != 405:
            return await http_exception_handler(request, exc)
        logger.warning(f"Rejected {request.method} {request.url.path}: not allowed")
        return Response(status_code=405, headers=exc.headers)

    def method_not_allowed(request: Request) -> Response:
        logger.warning(f"Rejected {request.method} {request.url.path}: POST only")
        return Response(status_code=405, headers={"Allow": "POST"})

    for path in EXTRACT_PATHS:
        app.add_api_route(
            path,
            extract_characters,
            methods=["POST"],
            response_model=ExtractionResponse,
            response_model_exclude_none=True,
            tags=["extraction"],
            operation_id=f"extract_characters{path.replace('/', '_')}",
        )
        app.add_api_route(
            path, method_not_allowed, methods=REJECTED_METHODS, include_in_schema=False
        )

    for path in SPLIT_AND_EMBED_PATHS:
        app.add_api_route(
            path,
            split_and_embed,
            methods=["POST"],
            response_model=SplitAndEmbedResponse,
            response_model_exclude_none=True,
            tags=["documents"],
            operation_id=f"split_and_embed{path.replace('/', '_')}",
        )
        app.add_api_route(
            path, method_not_allowed, methods=REJECTED_METHODS, include_in_schema=False
        )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["admin"],
        operation_id="health",
    )
    def health() -> HealthResponse:
        return HealthResponse(version=__version__)

    return app
