"""
@file: middleware.py
@description:
Middleware configuration for the FastAPI application.

The middleware components include:
- CORS configuration: Controls which domains can read the catalog
- Request logging: Logs each request and its processing time

@dependencies:
- fastapi: For CORSMiddleware
- starlette: BaseHTTPMiddleware
- extendable.core.config: For application settings
- extendable.core.logger: For structured logging
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from extendable.core.config import settings
from extendable.core.logger import setup_logger, log_request_details

logger = setup_logger("extendable.core.middleware")


def setup_cors(app: FastAPI) -> None:
    """
    Configure CORS middleware.

    The API is read-only, so any origin may call it outside production; in
    production only GET requests from localhost are accepted.

    Args:
        app: The FastAPI application instance
    """
    origins = ["*"]
    if settings.APP_ENV == "production":
        origins = ["http://localhost", "http://localhost:8000"]

    logger.info(f"Setting up CORS middleware with origins: {origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging API requests and their processing time.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        log_request_details(logger, request, process_time, response.status_code)
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def setup_request_logging(app: FastAPI) -> None:
    logger.debug("Setting up request logging middleware")
    app.add_middleware(RequestLoggingMiddleware)


def setup_all_middleware(app: FastAPI) -> None:
    """
    Configure and add all middleware to the FastAPI application.
    """
    setup_cors(app)
    setup_request_logging(app)
