"""
Tests for settings on disk.
"""

import json

from interloc.config import CheckConfig, get_config_path, load_config, save_config


class TestConfig:
    """Tests for settings on disk."""

    def test_defaults_when_missing(self, tmp_path):
        config = load_config(str(tmp_path))
        assert config.bottom_policy == "strict"
        assert config.is_strict()
        assert config.color

    def test_save_and_load(self, tmp_path):
        save_config(str(tmp_path), CheckConfig(bottom_policy="permissive", color=False))
        assert get_config_path(str(tmp_path)).exists()

        config = load_config(str(tmp_path))
        assert config.bottom_policy == "permissive"
        assert not config.is_strict()
        assert not config.color

    def test_corrupt_file_uses_defaults(self, tmp_path):
        path = get_config_path(str(tmp_path))
        path.parent.mkdir(parents=True)
        path.write_text("{not json")
        assert load_config(str(tmp_path)) == CheckConfig()

    def test_unknown_policy_falls_back(self, tmp_path):
        path = get_config_path(str(tmp_path))
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"bottom_policy": "lenient"}))
        assert load_config(str(tmp_path)).bottom_policy == "strict"
