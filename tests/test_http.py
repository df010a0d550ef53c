"""
Tests for the FastAPI adapter.
"""

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from fieldguard.adapters import (
    FailureAuditMiddleware,
    bind_session,
    input_bag,
    register_error_handlers,
    validated,
)
from fieldguard.validation import ValidationSession

SIGNUP = {
    "age": {"type": "int", "range": "18-65"},
    "tags": {"type": "int", "multiple": True, "required": False},
}


def create_app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.add_middleware(FailureAuditMiddleware)

    @app.get("/handled")
    async def handled(session: ValidationSession = Depends(validated(SIGNUP))):
        return {
            "valid": session.valid,
            "errors": {field: failure.message() for field, failure in session.errors.items()},
        }

    @app.get("/ignored")
    async def ignored(session: ValidationSession = Depends(validated(SIGNUP))):
        return {"valid": session.valid}

    @app.get("/messages")
    async def messages(session: ValidationSession = Depends(validated(SIGNUP, "messages"))):
        return {"errors": session.errors}

    @app.post("/bag")
    async def bag(request: Request):
        return await input_bag(request)

    @app.get("/broken")
    async def broken(request: Request):
        await bind_session(request, {"age": {"type": "nope"}})
        return {}

    return app


@pytest.fixture
def client():
    return TestClient(create_app())


class TestInputBag:
    """Query and form input become the bag."""

    def test_query_and_form_merge(self, client):
        response = client.post("/bag?q=x", data={"a": ["1", "2"], "b": "3"})
        assert response.json() == {"q": "x", "a": ["1", "2"], "b": "3"}

    def test_bracket_keys_become_lists(self, client):
        response = client.post("/bag", params=[("tags[]", "1")])
        assert response.json() == {"tags": ["1"]}


class TestBoundSessions:
    """Sessions bound to a request are audited after the endpoint."""

    def test_valid_request(self, client):
        response = client.get("/handled", params=[("age", "30"), ("tags[]", "1"), ("tags[]", "2")])
        assert response.status_code == 200
        assert response.json() == {"valid": {"age": 30, "tags": [1, 2]}, "errors": {}}

    def test_handled_failures(self, client):
        response = client.get("/handled", params={"age": "15"})
        assert response.status_code == 200
        assert "age" in response.json()["errors"]
        assert response.json()["valid"] == {"tags": None}

    def test_unhandled_failures_become_500(self, client):
        response = client.get("/ignored", params={"age": "15"})
        assert response.status_code == 500
        body = response.json()["error"]
        assert body["code"] == "E9003_ASSERTION_FAILED"
        assert body["metadata"]["fields"] == ["age"]

    def test_clean_request_passes_audit(self, client):
        response = client.get("/ignored", params={"age": "30"})
        assert response.status_code == 200

    def test_message_mode_needs_no_acknowledgement(self, client):
        response = client.get("/messages", params={"age": "15"})
        assert response.status_code == 200
        assert response.json() == {"errors": {"age": "Invalid field age"}}

    def test_schema_fault_rendered_as_json(self, client):
        response = client.get("/broken")
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "E7001_UNKNOWN_TYPE"
