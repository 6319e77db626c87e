"""
Unit tests for the response envelope and the error handlers.
"""
import json

import pytest
from unittest.mock import MagicMock

from app.core.errors import (
    ConflictError,
    DependencyError,
    EmptyResultError,
    NotFoundError,
    api_error_handler,
)
from app.core.responses import created, envelope, status_text


def _body(response):
    return json.loads(response.body)


class TestEnvelope:

    @pytest.mark.parametrize("code, text", [(200, "success"), (201, "success"), (404, "fail"), (500, "error")])
    def test_status_text(self, code, text):
        assert status_text(code) == text

    def test_envelope_shape(self):
        response = envelope({"x": 1}, message="ok")
        assert response.status_code == 200
        assert _body(response) == {"status": "success", "code": 200, "message": "ok", "data": {"x": 1}}

    def test_created(self):
        response = created({"id": "1"})
        assert response.status_code == 201
        assert _body(response)["code"] == 201


class TestApiErrorHandler:

    @pytest.mark.asyncio
    async def test_conflict_carries_data(self):
        response = await api_error_handler(MagicMock(), ConflictError("taken", data={"fields": ["email"]}))
        assert response.status_code == 409
        assert _body(response) == {"status": "fail", "code": 409, "message": "taken", "data": {"fields": ["email"]}}

    @pytest.mark.asyncio
    async def test_empty_result_is_bare_204(self):
        response = await api_error_handler(MagicMock(), EmptyResultError())
        assert response.status_code == 204
        assert response.body == b""

    @pytest.mark.asyncio
    async def test_dependency_error_is_500_error(self):
        response = await api_error_handler(MagicMock(), DependencyError("media down"))
        assert response.status_code == 500
        assert _body(response)["status"] == "error"

    def test_default_message(self):
        assert NotFoundError().message == "Not found"
