"""
@file: test_middleware.py
@description:
Test suite for the FastAPI middleware components:
- CORS configuration
- Request logging middleware
- Full middleware setup on the application

@dependencies:
- pytest: For test framework
- fastapi.testclient: For testing FastAPI applications
- unittest.mock: To observe logging calls
"""

from unittest import mock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from extendable.core.middleware import (
    RequestLoggingMiddleware,
    setup_all_middleware,
    setup_cors,
    setup_request_logging,
)


def test_cors_middleware():
    """CORS headers are returned for cross-origin reads."""
    test_app = FastAPI()
    setup_cors(test_app)

    @test_app.get("/test-cors")
    def cors_endpoint():
        return {"message": "test"}

    client = TestClient(test_app)
    response = client.get("/test-cors", headers={"Origin": "http://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ["*", "http://example.com"]

    preflight = client.options(
        "/test-cors",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert preflight.status_code == 200
    assert "GET" in preflight.headers["access-control-allow-methods"]


def test_request_logging_middleware():
    """Every request is logged with its status code and timing."""
    test_app = FastAPI()
    setup_request_logging(test_app)

    @test_app.get("/test-logging")
    def logging_endpoint():
        return {"message": "test"}

    with mock.patch("extendable.core.middleware.log_request_details") as mock_log:
        client = TestClient(test_app)
        response = client.get("/test-logging")

    assert response.status_code == 200
    assert "x-process-time" in response.headers
    mock_log.assert_called_once()
    args, _ = mock_log.call_args
    assert args[3] == 200


def test_request_logging_for_missing_route():
    test_app = FastAPI()
    setup_request_logging(test_app)

    with mock.patch("extendable.core.middleware.log_request_details") as mock_log:
        response = TestClient(test_app).get("/missing")

    assert response.status_code == 404
    args, _ = mock_log.call_args
    assert args[3] == 404


def test_setup_all_middleware():
    test_app = FastAPI()
    setup_all_middleware(test_app)

    middleware_classes = [m.cls for m in test_app.user_middleware]
    assert RequestLoggingMiddleware in middleware_classes
    assert len(middleware_classes) == 2
