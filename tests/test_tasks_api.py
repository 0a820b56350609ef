"""Task CRUD, pagination, filtering and per-user isolation."""

import pytest


def _create(client, headers, title="Write report", **extra):
    resp = client.post("/api/tasks", json={"title": title, **extra}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


@pytest.fixture
def other_headers(make_user):
    bob = make_user(email="bob@example.com", name="Bob")
    return {"Authorization": f"Bearer {bob['tokens']['accessToken']}"}


def test_create_task_defaults_to_pending(client, auth_headers, registered):
    task = _create(client, auth_headers, description="Quarterly numbers")
    assert task["status"] == "PENDING"
    assert task["description"] == "Quarterly numbers"
    assert task["userId"] == registered["user"]["id"]
    assert {"id", "createdAt", "updatedAt"} <= set(task)


def test_create_task_with_status(client, auth_headers):
    assert _create(client, auth_headers, status="IN_PROGRESS")["status"] == "IN_PROGRESS"


@pytest.mark.parametrize(
    "body",
    [{}, {"title": ""}, {"title": "x" * 201}, {"title": "ok", "status": "DONE"}],
)
def test_create_task_validation(client, auth_headers, body):
    resp = client.post("/api/tasks", json=body, headers=auth_headers)
    assert resp.status_code == 422
    assert resp.get_json()["success"] is False


def test_list_tasks_paginates_newest_first(client, auth_headers):
    for i in range(12):
        _create(client, auth_headers, title=f"Task {i}")

    resp = client.get("/api/tasks?page=1&limit=5", headers=auth_headers)
    data = resp.get_json()["data"]
    assert [t["title"] for t in data["tasks"]] == [f"Task {i}" for i in range(11, 6, -1)]
    assert data["pagination"] == {"page": 1, "limit": 5, "total": 12, "totalPages": 3}

    last = client.get("/api/tasks?page=3&limit=5", headers=auth_headers).get_json()["data"]
    assert [t["title"] for t in last["tasks"]] == ["Task 1", "Task 0"]


def test_list_tasks_defaults_and_limit_cap(client, auth_headers):
    _create(client, auth_headers)
    default = client.get("/api/tasks", headers=auth_headers).get_json()["data"]["pagination"]
    assert default == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}

    capped = client.get("/api/tasks?limit=1000", headers=auth_headers).get_json()["data"]["pagination"]
    assert capped["limit"] == 100


def test_list_tasks_empty(client, auth_headers):
    data = client.get("/api/tasks", headers=auth_headers).get_json()["data"]
    assert data["tasks"] == []
    assert data["pagination"]["totalPages"] == 0


def test_list_tasks_filters(client, auth_headers):
    _create(client, auth_headers, title="Buy milk")
    _create(client, auth_headers, title="Buy bread", status="COMPLETED")
    _create(client, auth_headers, title="Call mom")

    search = client.get("/api/tasks?search=BUY", headers=auth_headers).get_json()["data"]
    assert {t["title"] for t in search["tasks"]} == {"Buy milk", "Buy bread"}

    done = client.get("/api/tasks?status=COMPLETED", headers=auth_headers).get_json()["data"]
    assert [t["title"] for t in done["tasks"]] == ["Buy bread"]

    both = client.get("/api/tasks?status=PENDING&search=buy", headers=auth_headers).get_json()["data"]
    assert [t["title"] for t in both["tasks"]] == ["Buy milk"]


@pytest.mark.parametrize(
    "term, expected",
    [
        ("0%", {"100% done"}),
        ("a_b", {"a_b"}),
        ("A_B", {"a_b"}),
        ("%", {"100% done"}),
    ],
)
def test_search_matches_wildcard_characters_literally(client, auth_headers, term, expected):
    for title in ("100% done", "1000 done", "a_b", "axb"):
        _create(client, auth_headers, title=title)

    resp = client.get("/api/tasks", query_string={"search": term}, headers=auth_headers)
    assert {t["title"] for t in resp.get_json()["data"]["tasks"]} == expected


@pytest.mark.parametrize("query", ["page=abc", "page=0", "limit=0", "status=DONE"])
def test_list_tasks_bad_query(client, auth_headers, query):
    assert client.get(f"/api/tasks?{query}", headers=auth_headers).status_code == 422


def test_get_update_delete_task(client, auth_headers):
    task = _create(client, auth_headers)

    fetched = client.get(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert fetched.get_json()["data"]["title"] == "Write report"

    updated = client.patch(
        f"/api/tasks/{task['id']}",
        json={"title": "Write final report", "status": "IN_PROGRESS"},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["title"] == "Write final report"
    assert updated.get_json()["data"]["status"] == "IN_PROGRESS"

    deleted = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert deleted.get_json() == {"success": True, "message": "Task deleted successfully"}
    assert client.get(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 404


def test_update_requires_a_field(client, auth_headers):
    task = _create(client, auth_headers)
    assert client.patch(f"/api/tasks/{task['id']}", json={}, headers=auth_headers).status_code == 422


def test_toggle_cycles_status(client, auth_headers):
    task = _create(client, auth_headers)
    seen = []
    for _ in range(3):
        resp = client.patch(f"/api/tasks/{task['id']}/toggle", headers=auth_headers)
        seen.append(resp.get_json()["data"]["status"])
    assert seen == ["IN_PROGRESS", "COMPLETED", "PENDING"]


def test_tasks_are_private(client, auth_headers, other_headers):
    task = _create(client, auth_headers)
    path = f"/api/tasks/{task['id']}"

    assert client.get(path, headers=other_headers).status_code == 404
    assert client.patch(path, json={"title": "mine now"}, headers=other_headers).status_code == 404
    assert client.patch(f"{path}/toggle", headers=other_headers).status_code == 404
    assert client.delete(path, headers=other_headers).status_code == 404
    assert client.get("/api/tasks", headers=other_headers).get_json()["data"]["tasks"] == []

    assert client.get(path, headers=auth_headers).get_json()["data"]["title"] == "Write report"


def test_missing_task(client, auth_headers):
    resp = client.get("/api/tasks/does-not-exist", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Task not found"}
