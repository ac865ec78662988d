"""Tests for YAML configuration loading."""

import pytest

from scriptcraft.core.config import get_config_value, load_unified_config, reload_configs
from scriptcraft.core.cs_parser import QualityGate
from scriptcraft.core.utils.csharp_text import indent


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SCRIPTCRAFT_CONFIG_DIR", str(tmp_path))
    reload_configs()
    yield tmp_path
    reload_configs()


class TestConfig:

    def test_shipped_defaults(self):
        reload_configs()
        assert get_config_value("parser", "quality_gate", "max_opaque_ratio") == 0.5
        assert get_config_value("generator", "indent_width") == 4

    def test_missing_file_uses_defaults(self, config_dir):
        assert load_unified_config() == {}
        assert get_config_value("generator", "indent_width", default=4) == 4
        assert QualityGate.from_config() == QualityGate()

    def test_override_file(self, config_dir):
        (config_dir / "scriptcraft.yaml").write_text(
            "parser:\n  quality_gate:\n    max_opaque_ratio: 0.8\n    small_body_max_elements: 1\n"
            "generator:\n  indent_width: 2\n"
        )
        reload_configs()

        assert QualityGate.from_config() == QualityGate(max_opaque_ratio=0.8, small_body_max_elements=1)
        assert indent(2) == "    "

    def test_walk_stops_at_non_mapping(self, config_dir):
        (config_dir / "scriptcraft.yaml").write_text("generator: 3\n")
        reload_configs()
        assert get_config_value("generator", "indent_width", default=4) == 4

    def test_malformed_yaml_is_ignored(self, config_dir):
        (config_dir / "scriptcraft.yaml").write_text("parser: [unclosed\n")
        reload_configs()
        assert load_unified_config() == {}
