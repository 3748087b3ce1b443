from unittest.mock import MagicMock

import pytest
from fastapi import status

from studytrack.errors import ValidationError
from studytrack.services.progress import CreateProgressUseCase


def test_create_progress(client, auth_headers):
    response = client.post("/user-1/progress", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_201_CREATED
    payload = response.json()
    assert payload["id"]
    assert payload["user_id"] == "user-1"
    assert payload["completed"] == 0


def test_create_progress_twice(client, auth_headers):
    client.post("/user-1/progress", headers=auth_headers("user-1"))

    response = client.post("/user-1/progress", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_increase_progress(client, auth_headers):
    client.post("/user-1/progress", headers=auth_headers("user-1"))

    client.patch("/user-1/progress/increase", headers=auth_headers("user-1"))
    response = client.patch("/user-1/progress/increase", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["completed"] == 2


def test_increase_missing_progress(client, auth_headers):
    response = client.patch("/user-1/progress/increase", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_increase_someone_elses_progress(client, auth_headers, repositories):
    client.post("/user-2/progress", headers=auth_headers("user-2"))

    response = client.patch("/user-2/progress/increase", headers=auth_headers("user-1"))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert repositories.progress.get_by_user("user-2")["completed"] == 0


def test_statistics(client, auth_headers):
    headers = auth_headers("user-1")
    client.post("/user-1/progress", headers=headers)
    client.patch("/user-1/progress/increase", headers=headers)
    first = client.post("/user-1/directory", json={"name": "Algebra"}, headers=headers).json()
    client.post("/user-1/directory", json={"name": "Biology"}, headers=headers)
    client.patch(f"/directory/{first['id']}/deactivate", headers=headers)

    response = client.get("/user-1/progress/statistics", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["user_id"] == "user-1"
    assert payload["completed"] == 1
    assert payload["active_directories"] == 1
    assert payload["inactive_directories"] == 1
    assert payload["last_updated_at"]


def test_statistics_requires_token(client):
    response = client.get("/user-1/progress/statistics")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized access"}


def test_create_progress_again_keeps_count(client, auth_headers, repositories):
    headers = auth_headers("user-1")
    client.post("/user-1/progress", headers=headers)
    client.patch("/user-1/progress/increase", headers=headers)

    response = client.post("/user-1/progress", headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Progress already exists for this user."}
    assert repositories.progress.get_by_user("user-1")["completed"] == 1


def test_create_progress_relies_on_conditional_insert():
    repo = MagicMock()
    repo.get_by_user.return_value = None
    repo.create.return_value = False

    with pytest.raises(ValidationError):
        CreateProgressUseCase(repo).execute("user-1", "user-1")

    repo.create.assert_called_once()
    repo.save.assert_not_called()
