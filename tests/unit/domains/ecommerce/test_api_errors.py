"""
Unit Tests for Result to HTTP response mapping
"""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config.settings import Settings
from app.core.domain import ConfigurationException, Error, IntegrationException, Ok, fail
from app.domains.ecommerce.api.errors import (
    error_response,
    register_exception_handlers,
    result_response,
    validation_errors_by_field,
)


def _body(response) -> dict:
    return json.loads(response.body)


class TestErrorResponse:
    def test_validation_errors_grouped_by_field(self):
        result = fail(
            Error.validation("Invalid card number", "ERR_INVALID_CARD_NUMBER", "CardNumber"),
            Error.validation("Invalid CVV", "ERR_INVALID_CVV", "CVV"),
            Error.validation("Bad request", "ERR_GENERIC", ""),
        )

        response = error_response(result)

        assert response.status_code == 400
        assert _body(response)["errors"] == {
            "CardNumber": ["Invalid card number"],
            "CVV": ["Invalid CVV"],
            "general": ["Bad request"],
        }

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (Error.not_found("missing", "ERR_NOT_FOUND"), 404),
            (Error.conflict("dup", "ERR_CONFLICT"), 409),
            (Error.failure("nope", "ERR_FAILURE"), 422),
            (Error.unexpected("boom", "ERR_UNKNOWN"), 500),
        ],
    )
    def test_status_follows_first_error_type(self, error, status_code):
        response = error_response(fail(error))

        body = _body(response)
        assert response.status_code == status_code
        assert body["code"] == error.code
        assert body["details"] == []

    def test_remaining_errors_become_details(self):
        result = fail(Error.failure("Payment failed", "ERR_PAYMENT_FAILED"), Error.not_found("x", "ERR_X"))

        assert [d["code"] for d in _body(error_response(result))["details"]] == ["ERR_X"]

    def test_grouping_helper(self):
        assert validation_errors_by_field(fail(Error.validation("d", "C", "f"))) == {"f": ["d"]}


class TestResultResponse:
    def test_ok_value_is_encoded(self):
        response = result_response(Ok({"total": 3}), success_status=201)

        assert response.status_code == 201
        assert _body(response) == {"total": 3}

    def test_ok_none_is_no_content(self):
        assert result_response(Ok(None)).status_code == 204


class TestGlobalExceptionHandler:
    def _client(self, environment: str) -> TestClient:
        app = FastAPI()
        register_exception_handlers(app, Settings(_env_file=None, ENVIRONMENT=environment))

        @app.get("/boom")
        async def boom():
            raise RuntimeError("database exploded")

        return TestClient(app, raise_server_exceptions=False)

    def test_details_hidden_in_production(self):
        response = self._client("production").get("/boom")

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"
        assert "detail" not in response.json()

    def test_details_exposed_in_development(self):
        response = self._client("development").get("/boom")

        assert response.json()["exception"] == "RuntimeError"
        assert response.json()["detail"] == "database exploded"


class TestDomainExceptionHandler:
    def _client(self, environment: str) -> TestClient:
        app = FastAPI()
        register_exception_handlers(app, Settings(_env_file=None, ENVIRONMENT=environment))

        @app.get("/postal")
        async def postal():
            raise IntegrationException("postal_lookup", "Postal lookup failed for 01310100")

        @app.get("/wiring")
        async def wiring():
            raise ConfigurationException("unit_of_work", "No repository registered for IEmailSender")

        return TestClient(app, raise_server_exceptions=False)

    def test_status_comes_from_exception(self):
        client = self._client("production")

        assert client.get("/postal").status_code == 502
        assert client.get("/wiring").status_code == 500

    def test_details_hidden_in_production(self):
        body = self._client("production").get("/wiring").json()

        assert body == {"error": True, "code": "CONFIGURATION_ERROR", "status_code": 500}

    def test_details_exposed_in_development(self):
        body = self._client("development").get("/postal").json()

        assert body["exception"] == {
            "error": "INTEGRATION_ERROR",
            "message": "Postal lookup failed for 01310100",
            "details": {"service": "postal_lookup"},
        }
