"""Tests for mdbook_d2png.config — models, mdBook context, and YAML loader."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from mdbook_d2png.config import (
    DEFAULT_CONFIG_TEMPLATE,
    Fonts,
    RenderConfig,
    config_from_context,
    load_config,
    source_dir_from_context,
)
from mdbook_d2png.config.loader import _expand_env_vars


# ── RenderConfig ────────────────────────────────────────────────────


class TestRenderConfigDefaults:
    def test_defaults(self):
        cfg = RenderConfig()
        assert cfg.path == Path("d2")
        assert cfg.output_dir == Path("d2")
        assert cfg.layout is None
        assert cfg.inline is False
        assert cfg.fonts is None
        assert cfg.theme_id is None
        assert cfg.dark_theme_id is None

    def test_empty_table_is_default(self):
        assert RenderConfig.model_validate({}) == RenderConfig()


class TestRenderConfigParsing:
    def test_kebab_case_keys(self):
        cfg = RenderConfig.model_validate({
            "path": "/custom/bin/d2",
            "layout": "elk",
            "output-dir": "d2-img",
            "theme-id": "3",
            "dark-theme-id": "200",
        })
        assert cfg.path == Path("/custom/bin/d2")
        assert cfg.layout == "elk"
        assert cfg.output_dir == Path("d2-img")
        assert cfg.theme_id == "3"
        assert cfg.dark_theme_id == "200"

    def test_field_names_accepted(self):
        cfg = RenderConfig(output_dir="out", inline=True)
        assert cfg.output_dir == Path("out")
        assert cfg.inline is True

    def test_mdbook_keys_ignored(self):
        cfg = RenderConfig.model_validate({
            "command": "mdbook-d2-png",
            "renderers": ["html"],
            "before": ["links"],
            "inline": True,
        })
        assert cfg.inline is True

    def test_fonts_require_all_three(self):
        with pytest.raises(ValidationError):
            RenderConfig.model_validate({"fonts": {"regular": "r.ttf"}})

    def test_fonts(self):
        cfg = RenderConfig.model_validate(
            {"fonts": {"regular": "r.ttf", "italic": "i.ttf", "bold": "b.ttf"}}
        )
        assert cfg.fonts == Fonts(regular="r.ttf", italic="i.ttf", bold="b.ttf")

    def test_invalid_inline_rejected(self):
        with pytest.raises(ValidationError):
            RenderConfig.model_validate({"inline": "sometimes"})

    def test_frozen(self):
        cfg = RenderConfig()
        with pytest.raises(ValidationError):
            cfg.inline = True


# ── mdBook context ──────────────────────────────────────────────────


def _context(table=None, src=None):
    config = {"book": {}, "preprocessor": {}}
    if table is not None:
        config["preprocessor"]["d2-png"] = table
    if src is not None:
        config["book"]["src"] = src
    return {"root": "/books/demo", "config": config, "renderer": "html", "mdbook_version": "0.4.40"}


class TestContext:
    def test_reads_preprocessor_table(self):
        cfg = config_from_context(_context({"layout": "dagre", "output-dir": "img"}))
        assert cfg.layout == "dagre"
        assert cfg.output_dir == Path("img")

    def test_missing_table(self):
        with pytest.raises(ValueError, match=r"\[preprocessor.d2-png\]"):
            config_from_context(_context())

    def test_invalid_table(self):
        with pytest.raises(ValueError, match="Unable to deserialize"):
            config_from_context(_context({"inline": "maybe"}))

    def test_default_source_dir(self):
        assert source_dir_from_context(_context({})) == Path("/books/demo/src")

    def test_custom_source_dir(self):
        assert source_dir_from_context(_context({}, src="docs")) == Path("/books/demo/docs")


# ── YAML loader ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == RenderConfig()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("layout: elk\ninline: true\noutput-dir: diagrams\n")
        cfg = load_config(str(path))
        assert cfg.layout == "elk"
        assert cfg.inline is True
        assert cfg.output_dir == Path("diagrams")

    def test_project_local_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "d2png.yaml").write_text("theme-id: '4'\n")
        assert load_config().theme_id == "4"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ValueError, match="not found"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("layout: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(str(path))

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("inline: sometimes\n")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config(str(path))

    def test_env_var_expansion(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("path: ${D2_HOME}/bin/d2\n")
        with patch.dict(os.environ, {"D2_HOME": "/opt/d2"}):
            cfg = load_config(str(path))
        assert cfg.path == Path("/opt/d2/bin/d2")

    def test_default_template_parses(self, tmp_path):
        path = tmp_path / "d2png.yaml"
        path.write_text(DEFAULT_CONFIG_TEMPLATE)
        assert load_config(str(path)) == RenderConfig()


def test_expand_env_vars_nested():
    with patch.dict(os.environ, {"X": "1"}, clear=False):
        assert _expand_env_vars({"a": ["${X}", {"b": "${X}-y"}], "c": 3}) == {
            "a": ["1", {"b": "1-y"}],
            "c": 3,
        }
