"""Role catalog endpoint tests."""

from fastapi.testclient import TestClient

from tests.factories import UserFactory


def test_roles_catalog(client: TestClient, login_as) -> None:
    login_as(UserFactory.viewer())

    roles = {role["name"]: role for role in client.get("/api/v1/roles").json()}

    assert roles["admin"]["permissions"] == ["*"]
    assert "fieldops.timeentry" in roles["field_ops"]["permissions"]
    assert roles["viewer"]["permissions"] == ["projects.view"]


def test_permission_catalog_is_grouped(client: TestClient, login_as) -> None:
    login_as(UserFactory.viewer())

    categories = client.get("/api/v1/roles/permissions").json()

    assert [c["name"] for c in categories] == ["Projects", "Tasks", "Administration"]
    assert {"key": "audit.read", "name": "Read Audit Log"} in categories[2]["permissions"]
