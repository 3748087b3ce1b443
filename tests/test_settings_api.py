from unittest.mock import MagicMock

import pytest
from fastapi import status

from studytrack.errors import ValidationError
from studytrack.services.settings import CreateSettingsUseCase


def test_create_default_settings(client, auth_headers):
    response = client.post("/user-1/settings", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_201_CREATED
    payload = response.json()
    assert payload["id"]
    assert payload["user_id"] == "user-1"
    assert payload["theme"] == "light"
    assert payload["notifications"] is True
    assert payload["language"] == "en"


def test_create_settings_twice(client, auth_headers):
    client.post("/user-1/settings", headers=auth_headers("user-1"))

    response = client.post("/user-1/settings", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Settings already exist for this user."}


def test_create_settings_requires_token(client, repositories):
    response = client.post("/user-1/settings")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert repositories.settings.store == {}


def test_find_settings(client, auth_headers):
    client.post("/user-1/settings", headers=auth_headers("user-1"))

    response = client.get("/user-1/settings", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["theme"] == "light"


def test_find_missing_settings(client, auth_headers):
    response = client.get("/user-1/settings", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_find_someone_elses_settings(client, auth_headers):
    client.post("/user-2/settings", headers=auth_headers("user-2"))

    response = client.get("/user-2/settings", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_update_settings_keeps_omitted_fields(client, auth_headers):
    client.post("/user-1/settings", headers=auth_headers("user-1"))

    response = client.put("/user-1/settings", json={"theme": "dark"}, headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["theme"] == "dark"
    assert payload["notifications"] is True
    assert payload["language"] == "en"


def test_update_settings_rejects_unknown_theme(client, auth_headers):
    client.post("/user-1/settings", headers=auth_headers("user-1"))

    response = client.put("/user-1/settings", json={"theme": "neon"}, headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "theme" in response.json()["error"]


def test_update_settings_rejects_unknown_fields(client, auth_headers):
    client.post("/user-1/settings", headers=auth_headers("user-1"))

    response = client.put("/user-1/settings", json={"admin": True}, headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_missing_settings(client, auth_headers):
    response = client.put("/user-1/settings", json={"notifications": False}, headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_settings_when_insert_loses_the_race():
    repo = MagicMock()
    repo.get_by_user.return_value = None
    repo.create.return_value = False

    with pytest.raises(ValidationError, match="already exist"):
        CreateSettingsUseCase(repo).execute("user-1", "user-1")
