"""
Tests for slidepack configuration loading.
"""

import pytest
import yaml

from slidepack.config import (
    LoggingOptions,
    OutputOptions,
    SlidePackConfig,
    find_config_file,
    get_config,
    load_config,
    save_config,
    set_config,
)


class TestSlidePackConfig:

    def test_defaults(self):
        config = SlidePackConfig()
        assert config.cover.validate_png is True
        assert config.output.directory == "output"
        assert config.output.filename_max_chars == 80
        assert config.logging.level == "WARNING"

    def test_dict_round_trip(self):
        config = SlidePackConfig.from_dict({
            "cover": {"validate_png": False},
            "output": {"directory": "dist", "default_basename": "deck"},
            "logging": {"level": "info"},
        })
        assert config.cover.validate_png is False
        assert config.output.directory == "dist"
        assert config.logging.level == "INFO"
        assert SlidePackConfig.from_dict(config.to_dict()) == config

    def test_partial_dict_uses_defaults(self):
        config = SlidePackConfig.from_dict({"output": None})
        assert config == SlidePackConfig()

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingOptions(level="LOUD")

    def test_invalid_filename_length(self):
        with pytest.raises(ValueError):
            OutputOptions(filename_max_chars=0)


class TestLoadConfig:

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({"output": {"directory": "build"}}), encoding="utf-8")
        assert load_config(path).output.directory == "build"

    def test_explicit_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "slidepack.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == SlidePackConfig()

    def test_found_upward(self, tmp_path, monkeypatch):
        (tmp_path / "slidepack.yaml").write_text("logging:\n  level: DEBUG\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == tmp_path / "slidepack.yaml"

        monkeypatch.chdir(nested)
        assert load_config().logging.level == "DEBUG"

    def test_found_in_dot_directory(self, tmp_path):
        (tmp_path / ".slidepack").mkdir()
        (tmp_path / ".slidepack" / "slidepack.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file(tmp_path) == tmp_path / ".slidepack" / "slidepack.yaml"

    def test_broken_autodetected_file_ignored(self, tmp_path, monkeypatch):
        (tmp_path / "slidepack.yaml").write_text("logging: {level: NOPE}\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert load_config() == SlidePackConfig()

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "slidepack.yaml"
        path.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("SLIDEPACK_LOG_LEVEL", "error")
        monkeypatch.setenv("SLIDEPACK_VALIDATE_PNG", "false")
        monkeypatch.setenv("SLIDEPACK_OUTPUT_DIR", "/tmp/decks")

        config = load_config(path)
        assert config.logging.level == "ERROR"
        assert config.cover.validate_png is False
        assert config.output.directory == "/tmp/decks"

    def test_save_and_reload(self, tmp_path):
        config = SlidePackConfig.from_dict({"output": {"filename_max_chars": 40}})
        path = tmp_path / "out" / "slidepack.yaml"
        save_config(config, path)
        assert load_config(path) == config


class TestGlobalConfig:

    def test_set_and_get(self):
        config = SlidePackConfig.from_dict({"output": {"directory": "x"}})
        set_config(config)
        assert get_config() is config

    def test_lazy_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config() == SlidePackConfig()
