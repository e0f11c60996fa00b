"""Tests for structify configuration loading."""

from pathlib import Path

import pytest

from structify.core.config import TransformConfig, config_from_dict, find_config, load_config
from structify.core.errors import ConfigError


class TestTransformConfig:
    """Test configuration validation."""

    def test_defaults(self) -> None:
        config = TransformConfig()
        assert config.on_duplicate == "overwrite"
        assert config.fold_constants is True
        assert config.emit_shadow is True
        assert config.indent == "    "

    def test_invalid_policy(self) -> None:
        with pytest.raises(ConfigError, match="on_duplicate must be one of"):
            TransformConfig(on_duplicate="ignore")  # type: ignore[arg-type]

    @pytest.mark.parametrize("indent", ["", "x", " - "])
    def test_invalid_indent(self, indent: str) -> None:
        with pytest.raises(ConfigError, match="indent"):
            TransformConfig(indent=indent)


class TestConfigFromDict:
    """Test building configuration from parsed TOML."""

    def test_partial_settings(self) -> None:
        config = config_from_dict({"on_duplicate": "error", "indent": "\t"})
        assert config.on_duplicate == "error"
        assert config.indent == "\t"
        assert config.emit_shadow is True

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="unknown configuration key"):
            config_from_dict({"fold": True}, source="structify.toml")

    def test_wrong_type(self) -> None:
        with pytest.raises(ConfigError, match="'emit_shadow' must be bool, got str"):
            config_from_dict({"emit_shadow": "yes"})

    def test_integer_is_not_bool(self) -> None:
        with pytest.raises(ConfigError):
            config_from_dict({"fold_constants": 1})


class TestLoadConfig:
    """Test reading configuration files."""

    def test_structify_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "structify.toml"
        path.write_text('on_duplicate = "error"\nemit_shadow = false\n')
        config = load_config(path)
        assert config.on_duplicate == "error"
        assert config.emit_shadow is False

    def test_pyproject_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.structify]\nfold_constants = false\n')
        assert load_config(path).fold_constants is False

    def test_pyproject_without_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n')
        assert load_config(path) == TransformConfig()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "structify.toml"
        path.write_text("on_duplicate = \n")
        with pytest.raises(ConfigError, match="invalid TOML"):
            load_config(path)


class TestFindConfig:
    """Test configuration discovery."""

    def test_walks_up_to_parent(self, tmp_path: Path) -> None:
        (tmp_path / "structify.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / "structify.toml"

    def test_structify_toml_wins(self, tmp_path: Path) -> None:
        (tmp_path / "structify.toml").write_text("")
        (tmp_path / "pyproject.toml").write_text("[tool.structify]\n")
        assert find_config(tmp_path) == tmp_path / "structify.toml"

    def test_pyproject_needs_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
        nested = tmp_path / "src"
        nested.mkdir()
        found = find_config(nested / "colors.rs")
        assert found != tmp_path / "pyproject.toml"
