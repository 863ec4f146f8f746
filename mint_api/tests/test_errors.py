from __future__ import annotations

import json
import logging

from fastapi.testclient import TestClient

from mint_api.errors import ApiError, BadRequest, Conflict, ServerError, ServiceUnavailable
from mint_api.logging import get_logger, setup_logging


def test_problem_shapes():
    err = Conflict("Mint rejected by the authority", code="mint_rejected", details={"reason": "X"})
    assert err.to_problem() == {
        "type": "https://aurora.dev/errors#mint_rejected",
        "title": "Mint Rejected",
        "status": 409,
        "code": "mint_rejected",
        "detail": "Mint rejected by the authority",
        "details": {"reason": "X"},
    }
    assert BadRequest().status_code == 400
    assert ServiceUnavailable().status_code == 503
    assert str(ServerError("boom")) == "boom"


def test_from_unexpected_wraps_as_server_error():
    err = ApiError.from_unexpected(KeyError("k"))
    assert isinstance(err, ServerError)
    assert err.details == {"exc_type": "KeyError", "str": "'k'"}


def test_unhandled_exception_is_500_problem(app):
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/boom")
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["title"] == "Internal Server Error"
    assert "kaboom" not in json.dumps(body)


def test_api_error_raised_from_route(app):
    @app.get("/teapot")
    def teapot():
        raise ApiError("short and stout", status_code=418, code="teapot")

    with TestClient(app) as c:
        resp = c.get("/teapot")
    assert resp.status_code == 418
    body = resp.json()
    assert body["code"] == "teapot"
    assert body["type"].endswith("#teapot")
    assert body["detail"] == "short and stout"


def test_json_logging_redacts_and_tags_service(capsys):
    setup_logging(service_name="mint-test", level="INFO", log_format="json")
    get_logger("mint_api.tests").info("hello", password="hunter2", token_id=7)
    line = capsys.readouterr().err.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "hello"
    assert event["service"] == "mint-test"
    assert event["password"] == "***"
    assert event["token_id"] == 7
    assert event["level"] == "info"


def test_stdlib_records_share_the_renderer(capsys):
    setup_logging(service_name="mint-test", level="INFO", log_format="json")
    logging.getLogger("aurora_vm.host").info("deployed %s", "x")
    event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert event["event"] == "deployed x"
    assert event["logger"] == "aurora_vm.host"
    assert event["service"] == "mint-test"
