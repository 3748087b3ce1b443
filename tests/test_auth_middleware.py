from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from starlette.responses import JSONResponse

from studytrack.apis.routes import HttpMethod, Route
from studytrack.apis.server import ApiServer
from studytrack.dependencies.api import current_user_id, ensure_authenticated
from studytrack.services.auth import TokenProvider

UNAUTHORIZED = {"error": "Unauthorized access"}


@pytest.fixture()
def spy():
    return MagicMock(name="downstream")


@pytest.fixture()
def protected_client(settings, tokens, spy):
    async def whoami(request):
        spy(current_user_id(request))
        return JSONResponse({"user_id": current_user_id(request)})

    route = Route("/whoami", HttpMethod.GET, whoami, middlewares=(ensure_authenticated(tokens),))
    with TestClient(ApiServer([route], settings).app) as client:
        yield client


def test_missing_header_is_rejected(protected_client, spy):
    response = protected_client.get("/whoami")

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    assert response.headers["www-authenticate"] == "Bearer"
    spy.assert_not_called()


@pytest.mark.parametrize(
    "header",
    ["", "Bearer", "Bearer ", "Basic dXNlcjpwYXNz", "Token abc", "Bearer a b"],
)
def test_malformed_header_is_rejected(protected_client, spy, header):
    response = protected_client.get("/whoami", headers={"Authorization": header})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    spy.assert_not_called()


def test_invalid_token_is_rejected(protected_client, spy):
    response = protected_client.get("/whoami", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    spy.assert_not_called()


def test_foreign_token_is_rejected(protected_client, spy, clock):
    forged = TokenProvider("someone-elses-secret", clock=clock).issue("user-1")

    response = protected_client.get("/whoami", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    spy.assert_not_called()


def test_expired_token_gets_the_same_generic_message(protected_client, spy, auth_headers, clock):
    headers = auth_headers("user-1")
    clock.advance(hours=2)

    response = protected_client.get("/whoami", headers=headers)

    assert response.status_code == 401
    assert response.json() == UNAUTHORIZED
    spy.assert_not_called()


def test_valid_token_reaches_handler_with_subject(protected_client, spy, auth_headers):
    response = protected_client.get("/whoami", headers=auth_headers("user-42"))

    assert response.status_code == 200
    assert response.json() == {"user_id": "user-42"}
    spy.assert_called_once_with("user-42")


def test_scheme_is_case_insensitive(protected_client, tokens):
    response = protected_client.get(
        "/whoami", headers={"Authorization": f"bearer {tokens.issue('user-7')}"}
    )

    assert response.status_code == 200
    assert response.json() == {"user_id": "user-7"}
