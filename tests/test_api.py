from __future__ import annotations

import pytest


def _create(client, headers, **overrides):
    payload = {"title": "T1", "summary": "S1", "link": "https://x"}
    payload.update(overrides)
    response = client.post("/api/news", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _ids(response):
    assert response.status_code == 200, response.text
    return [item["id"] for item in response.json()]


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["store"] == "memory"
    assert "version" in client.get("/api").json()


def test_requests_without_token_are_rejected(client):
    response = client.get("/api/news")
    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized, no token"}


def test_unknown_token_is_rejected(client):
    response = client.get("/api/news", headers={"Authorization": "Bearer demo_token_abc"})
    assert response.status_code == 401


def test_profile(client, admin_headers, reader_headers):
    assert client.get("/api/auth/profile", headers=admin_headers).json() == {"name": "admin", "isAdmin": True}
    assert client.get("/api/auth/profile", headers=reader_headers).json() == {"name": "doug", "isAdmin": False}


def test_create_returns_camel_case_item(client, admin_headers):
    item = _create(client, admin_headers)
    assert item["isFavorite"] is False
    assert item["isAdminKeeper"] is False
    assert item["isArchived"] is False
    assert item["isRead"] is False
    assert item["lastReadAt"] is None
    assert item["date"]

    fetched = client.get(f"/api/news/{item['id']}", headers=admin_headers).json()
    assert fetched == item


def test_create_missing_field_is_400(client, admin_headers):
    response = client.post("/api/news", json={"title": "T1", "link": "https://x"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Title, summary, and link are required"}


def test_reader_cannot_use_admin_endpoints(client, admin_headers, reader_headers):
    item = _create(client, admin_headers)
    assert client.post("/api/news", json={"title": "a", "summary": "b", "link": "c"}, headers=reader_headers).status_code == 403
    assert client.put(f"/api/news/{item['id']}", json={"title": "x"}, headers=reader_headers).status_code == 403
    assert client.delete(f"/api/news/{item['id']}", headers=reader_headers).status_code == 403
    for action in ("archive", "unarchive", "toggle-admin-keeper"):
        response = client.post(f"/api/news/{item['id']}/{action}", headers=reader_headers)
        assert response.status_code == 403
        assert response.json() == {"message": "Not authorized as an admin"}

    unchanged = client.get(f"/api/news/{item['id']}", headers=reader_headers).json()
    assert unchanged == item


def test_archive_scenario(client, admin_headers, reader_headers):
    item = _create(client, admin_headers)
    assert item["id"] in _ids(client.get("/api/news", headers=reader_headers))

    archived = client.post(f"/api/news/{item['id']}/archive", headers=admin_headers).json()
    assert archived["isArchived"] is True
    assert item["id"] not in _ids(client.get("/api/news", headers=reader_headers))
    listed = client.get("/api/news", params={"archived": "true"}, headers=reader_headers).json()
    assert [i["id"] for i in listed] == [item["id"]]
    assert listed[0]["isArchived"] is True
    assert _ids(client.get("/api/news/archived", headers=reader_headers)) == [item["id"]]

    client.post(f"/api/news/{item['id']}/unarchive", headers=admin_headers)
    assert item["id"] in _ids(client.get("/api/news", headers=reader_headers))


def test_toggle_favorite_scenario(client, admin_headers, reader_headers):
    item = _create(client, admin_headers)
    first = client.post(f"/api/news/{item['id']}/toggle-favorite", headers=reader_headers).json()
    assert first["isFavorite"] is True
    second = client.post(f"/api/news/{item['id']}/toggle-favorite", headers=reader_headers).json()
    assert second["isFavorite"] is False


def test_mark_read_scenario(client, admin_headers, reader_headers):
    item = _create(client, admin_headers)
    first = client.post(f"/api/news/{item['id']}/mark-read", headers=reader_headers).json()
    assert first["isRead"] is True
    assert first["lastReadAt"] is not None
    second = client.post(f"/api/news/{item['id']}/mark-read", headers=reader_headers).json()
    assert second["isRead"] is True
    assert second["lastReadAt"] == first["lastReadAt"]


def test_read_filter_and_include_all(client, admin_headers, reader_headers):
    read = _create(client, admin_headers, title="read")
    unread = _create(client, admin_headers, title="unread")
    archived = _create(client, admin_headers, title="archived")
    client.post(f"/api/news/{read['id']}/mark-read", headers=reader_headers)
    client.post(f"/api/news/{archived['id']}/archive", headers=admin_headers)

    assert _ids(client.get("/api/news", params={"isRead": "true"}, headers=reader_headers)) == [read["id"]]
    assert _ids(client.get("/api/news", params={"isRead": "false"}, headers=reader_headers)) == [unread["id"]]
    everything = _ids(client.get("/api/news", params={"includeAll": "true", "archived": "false"}, headers=reader_headers))
    assert set(everything) == {read["id"], unread["id"], archived["id"]}


@pytest.mark.parametrize("value", ["yes", "1", "TRUE", ""])
def test_malformed_boolean_params_are_ignored(client, admin_headers, reader_headers, value):
    visible = _create(client, admin_headers, title="visible")
    hidden = _create(client, admin_headers, title="hidden")
    client.post(f"/api/news/{hidden['id']}/archive", headers=admin_headers)

    response = client.get("/api/news", params={"archived": value, "isRead": value, "includeAll": value}, headers=reader_headers)
    assert _ids(response) == [visible["id"]]


def test_favorites_modes(client, admin_headers, reader_headers):
    fav = _create(client, admin_headers, title="fav")
    keeper = _create(client, admin_headers, title="keeper")
    _create(client, admin_headers, title="plain")
    client.post(f"/api/news/{fav['id']}/toggle-favorite", headers=reader_headers)
    client.post(f"/api/news/{keeper['id']}/toggle-admin-keeper", headers=admin_headers)

    def keepers(**params):
        return set(_ids(client.get("/api/news/favorites", params=params, headers=reader_headers)))

    assert keepers() == {fav["id"], keeper["id"]}
    assert keepers(adminOnly="true") == {keeper["id"]}
    assert keepers(userOnly="true") == {fav["id"]}
    assert keepers(adminOnly="true", userOnly="true") == {keeper["id"]}


def test_update_changes_supplied_fields_only(client, admin_headers):
    item = _create(client, admin_headers)
    response = client.put(
        f"/api/news/{item['id']}",
        json={"title": "Edited", "isFavorite": True},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Edited"
    assert body["summary"] == "S1"
    assert body["isFavorite"] is False


def test_delete_then_not_found(client, admin_headers, reader_headers):
    item = _create(client, admin_headers)
    response = client.delete(f"/api/news/{item['id']}", headers=admin_headers)
    assert response.json() == {"message": "News item deleted successfully"}

    assert client.get(f"/api/news/{item['id']}", headers=reader_headers).status_code == 404
    assert client.delete(f"/api/news/{item['id']}", headers=admin_headers).status_code == 404
    assert _ids(client.get("/api/news", params={"includeAll": "true"}, headers=reader_headers)) == []


@pytest.mark.parametrize("action", ["toggle-favorite", "mark-read", "archive", "unarchive", "toggle-admin-keeper"])
def test_transitions_on_unknown_id(client, admin_headers, action):
    response = client.post(f"/api/news/missing/{action}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "News item not found"}


def test_create_with_non_text_field_is_400(client, admin_headers):
    response = client.post(
        "/api/news",
        json={"title": 123, "summary": "s", "link": "l"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    body = response.json()
    assert list(body) == ["message"]
    assert "title" in body["message"]
    assert _ids(client.get("/api/news", params={"includeAll": "true"}, headers=admin_headers)) == []


def test_update_with_non_text_field_is_400(client, admin_headers):
    item = _create(client, admin_headers)
    response = client.put(f"/api/news/{item['id']}", json={"summary": ["a", "b"]}, headers=admin_headers)
    assert response.status_code == 400
    assert "summary" in response.json()["message"]
    assert client.get(f"/api/news/{item['id']}", headers=admin_headers).json()["summary"] == "S1"
