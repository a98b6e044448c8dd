import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from middleware import RequestLoggingMiddleware


class LogCaptureHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def app():
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/boom")
    async def failing_endpoint():
        raise RuntimeError("store unavailable")

    @app.get("/test")
    async def test_endpoint():
        return JSONResponse({"hello": "world"})

    return app


def test_middleware_logs_request(app):
    log_handler = LogCaptureHandler()
    logger = logging.getLogger("geoguessr.requests")
    logger.addHandler(log_handler)
    logger.setLevel(logging.INFO)

    try:
        response = TestClient(app).get("/test")
    finally:
        logger.removeHandler(log_handler)

    request_id = response.headers["X-Request-ID"]
    assert len(request_id) == 36

    assert len(log_handler.records) == 1
    message = log_handler.records[0].getMessage()
    assert message.startswith(f"{request_id} GET /test 200 ")
    assert message.endswith("ms")


def test_middleware_turns_errors_into_logged_500(app):
    log_handler = LogCaptureHandler()
    logger = logging.getLogger("geoguessr.requests")
    logger.addHandler(log_handler)
    logger.setLevel(logging.INFO)

    try:
        response = TestClient(app).get("/boom")
    finally:
        logger.removeHandler(log_handler)

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    request_id = response.headers["X-Request-ID"]

    messages = [r.getMessage() for r in log_handler.records]
    assert messages[-1].startswith(f"{request_id} GET /boom 500 ")
    assert log_handler.records[0].levelno == logging.ERROR
