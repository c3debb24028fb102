"""Tests for specsite.config_loader."""

from pathlib import Path

import pytest

from specsite._errors import ConfigError
from specsite.config_loader import load_config


class TestLoadConfig:
    def test_no_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path.resolve()
        assert config.port == 8080

    def test_yaml_top_level_keys(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: 9001\noutput: out\n")
        config = load_config(tmp_path)
        assert config.port == 9001
        assert config.output_path == tmp_path / "out"

    def test_yml_extension(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yml").write_text("host: 0.0.0.0\n")
        assert load_config(tmp_path).host == "0.0.0.0"

    def test_yaml_section(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text(
            "specsite:\n  entry: spec/main.html\n  watch_patterns:\n    - spec/**/*\n"
        )
        config = load_config(tmp_path)
        assert config.entry == "spec/main.html"
        assert config.watch_patterns == ("spec/**/*",)

    def test_toml_section(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.toml").write_text(
            '[specsite]\nassets = "inline"\nrenderer_command = "npx ecmarkup"\n'
        )
        config = load_config(tmp_path)
        assert config.assets == "inline"
        assert config.renderer_command == ("npx", "ecmarkup")

    def test_renderer_command_list(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("renderer_command: [node, ecmarkup.js]\n")
        assert load_config(tmp_path).renderer_command == ("node", "ecmarkup.js")

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: 9001\n")
        assert load_config(tmp_path, port=9500).port == 9500

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: 9001\n")
        assert load_config(tmp_path, port=None, output=None).port == 9001

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: 1111\n")
        (tmp_path / "specsite.toml").write_text("port = 2222\n")
        assert load_config(tmp_path).port == 1111


class TestLoadConfigErrors:
    def test_unknown_key(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="colour"):
            load_config(tmp_path)

    def test_unknown_override(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="bogus"):
            load_config(tmp_path, bogus=True)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.toml").write_text("port = \n")
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(tmp_path)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_bad_port_type(self, tmp_path: Path) -> None:
        (tmp_path / "specsite.yaml").write_text("port: eighty\n")
        with pytest.raises(ConfigError, match="port"):
            load_config(tmp_path)
