"""Tests for the command-line entry point."""

from scriptcraft.__main__ import main
from scriptcraft.core.model.factory import create_element, create_project
from scriptcraft.core.model.models import ElementType
from scriptcraft.core.model.serialization import dump_project, load_project


def _write_project(tmp_path):
    project = create_project("Baker")
    project.settings.class_name = "Baker"
    element = create_element(ElementType.TOGGLE)
    element.variable_name = "bakeLights"
    project.elements = [element]
    path = tmp_path / "baker.json"
    path.write_text(dump_project(project), encoding="utf-8")
    return path


class TestCli:

    def test_generate_to_directory(self, tmp_path):
        project_path = _write_project(tmp_path)

        assert main(["generate", str(project_path), "-o", str(tmp_path)]) == 0

        code = (tmp_path / "Baker.cs").read_text(encoding="utf-8")
        assert "public class Baker : EditorWindow" in code

    def test_generate_then_parse(self, tmp_path, capsys):
        project_path = _write_project(tmp_path)
        main(["generate", str(project_path), "-o", str(tmp_path)])
        capsys.readouterr()

        assert main(["parse", str(tmp_path / "Baker.cs")]) == 0

        project = load_project(capsys.readouterr().out)
        assert [(e.type, e.variable_name) for e in project.elements] == [(ElementType.TOGGLE, "bakeLights")]

    def test_generate_bad_project(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert main(["generate", str(path)]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_parse_missing_file(self, tmp_path, capsys):
        assert main(["parse", str(tmp_path / "Missing.cs")]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_parse_non_utf8_file(self, tmp_path, capsys):
        path = tmp_path / "Latin.cs"
        path.write_bytes(b"// caf\xe9\npublic class Latin : EditorWindow { }\n")

        assert main(["parse", str(path)]) == 1
        assert capsys.readouterr().err.startswith("error:")
