"""Tests for the FastAPI routes."""

import pytest
from fastapi.testclient import TestClient

from scriptcraft.api.app import create_app
from scriptcraft.core.generator import generate_code
from scriptcraft.core.model.factory import create_element, create_project
from scriptcraft.core.model.models import ElementType
from scriptcraft.core.model.serialization import project_from_dict, project_to_dict


@pytest.fixture
def client():
    return TestClient(create_app())


def _project():
    project = create_project("Foo")
    project.settings.class_name = "Foo"
    element = create_element(ElementType.TEXT_FIELD)
    element.variable_name = "userName"
    project.elements = [element]
    return project


class TestRoutes:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_generate(self, client):
        response = client.post("/api/generate", json={"project": project_to_dict(_project())})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["file_name"] == "Foo.cs"
        assert "public class Foo : EditorWindow" in data["code"]
        assert data["syntax_warnings"] == []

    def test_generate_rejects_invalid_project(self, client):
        response = client.post("/api/generate", json={"project": {"name": "Bad", "class_kind": "Window"}})
        assert response.status_code == 400

    def test_parse(self, client):
        code = generate_code(_project())

        response = client.post("/api/parse", json={"file_name": "Foo.cs", "content": code})

        assert response.status_code == 200
        data = response.json()
        assert data["warnings"] == []
        project = project_from_dict(data["project"])
        assert [(e.type, e.variable_name) for e in project.elements] == [(ElementType.TEXT_FIELD, "userName")]

    def test_parse_folder(self, client):
        files = [
            {"name": "Notes.txt", "content": "ignored"},
            {"name": "Foo.cs", "content": generate_code(_project())},
        ]
        response = client.post("/api/parse-folder", json={"files": files})

        assert response.status_code == 200
        assert response.json()["warnings"] == ["Primary file: Foo.cs"]

    def test_default_element(self, client):
        response = client.get("/api/elements/Toggle/default")
        assert response.status_code == 200
        element = response.json()["element"]
        assert (element["type"], element["default_value"]) == ("Toggle", "false")

    def test_unknown_element_type(self, client):
        assert client.get("/api/elements/Knob/default").status_code == 404
