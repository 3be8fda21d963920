"""Unit tests for layout configuration loading."""

import pytest
from pydantic import ValidationError

from neurolayout.core.config import LayoutConfig, Theme, load_config
from neurolayout.core.exceptions import ConfigError


class TestLayoutConfig:
    def test_defaults(self):
        config = LayoutConfig()
        assert (config.width, config.height) == (800.0, 600.0)
        assert config.theme == Theme.DARK
        assert config.throttle_ms == 16.0
        assert config.transition_ms == 800.0
        assert config.glow_period_ms == 2000.0
        assert config.drag_release_ms == 100.0

    def test_rejects_empty_viewport(self):
        with pytest.raises(ValidationError):
            LayoutConfig(width=0)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == LayoutConfig()

    def test_reads_layout_section(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("layout:\n  theme: light\n  throttle_ms: 33\n  unknown_key: 1\n")

        config = load_config(path)
        assert config.theme == Theme.LIGHT
        assert config.throttle_ms == 33.0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == LayoutConfig()

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("layout:\n  transition_ms: -5\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_malformed_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("layout: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(path)
