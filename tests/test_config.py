"""Tests for specsite.config."""

from pathlib import Path

import pytest

from specsite._errors import ConfigError
from specsite.config import SiteConfig


class TestSiteConfig:
    """SiteConfig — frozen dataclass with the original build script's defaults."""

    def test_defaults(self) -> None:
        config = SiteConfig()
        assert config.entry == "src/index.html"
        assert config.output == Path("docs")
        assert config.watch_patterns == ("src/**/*",)
        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.js == "ecmarkup.js"
        assert config.css == "ecmarkup.css"
        assert config.assets == "none"
        assert config.renderer_command == ("ecmarkup",)
        assert config.live_reload is True
        assert config.initial_build is False

    def test_frozen(self) -> None:
        config = SiteConfig()
        with pytest.raises(AttributeError):
            config.port = 9000  # type: ignore[misc]

    def test_paths_resolve_from_root(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path)
        assert config.entry_path == tmp_path / "src" / "index.html"
        assert config.output_path == tmp_path / "docs"

    def test_absolute_output_preserved(self, tmp_path: Path) -> None:
        output = tmp_path / "elsewhere" / "site"
        config = SiteConfig(root=tmp_path / "proj", output=output)
        assert config.output_path == output

    def test_string_output_coerced(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path, output="public")  # type: ignore[arg-type]
        assert config.output_path == tmp_path / "public"

    def test_relative_root_resolved_to_absolute(self) -> None:
        config = SiteConfig(root=Path("proposal"))
        assert config.root.is_absolute()

    def test_output_patterns_relative_to_root(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path)
        assert config.output_patterns == ("docs/**/*",)

    def test_output_patterns_outside_root(self, tmp_path: Path) -> None:
        output = tmp_path / "out"
        config = SiteConfig(root=tmp_path / "proj", output=output)
        assert config.output_patterns == (f"{output.as_posix()}/**/*",)


class TestSiteConfigValidation:
    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ConfigError, match="port"):
            SiteConfig(port=port)

    def test_port_zero_allowed(self) -> None:
        assert SiteConfig(port=0).port == 0

    def test_unknown_assets_mode(self) -> None:
        with pytest.raises(ConfigError, match="assets"):
            SiteConfig(assets="bundled")  # type: ignore[arg-type]

    def test_negative_delay(self) -> None:
        with pytest.raises(ConfigError):
            SiteConfig(rebuild_delay_ms=-5)

    def test_empty_renderer_command(self) -> None:
        with pytest.raises(ConfigError, match="renderer_command"):
            SiteConfig(renderer_command=())

    def test_empty_watch_patterns(self) -> None:
        with pytest.raises(ConfigError, match="watch_patterns"):
            SiteConfig(watch_patterns=())
