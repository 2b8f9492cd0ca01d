"""Tests for renderer settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dslpdf.core.config import RendererSettings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("DSLPDF_FONTS_DIR", raising=False)
    monkeypatch.delenv("DSLPDF_TEMPLATE", raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings == RendererSettings()
        assert settings.image_timeout == 20.0
        assert settings.pie_arc == "wedge"
        assert settings.default_template == "default"

    def test_yaml_file(self, tmp_path):
        cfg = tmp_path / "dslpdf.yaml"
        cfg.write_text(
            "fonts_dir: ./fonts\n"
            "default_template: report\n"
            "image_timeout: 5\n"
            "pie_arc: polygon\n"
            "font_assets:\n"
            "  NotoSansArabic: ./fonts/NotoSansArabic-Regular.ttf\n",
            encoding="utf-8",
        )
        settings = load_settings(cfg)
        assert settings.fonts_dir == Path("./fonts")
        assert settings.default_template == "report"
        assert settings.image_timeout == 5
        assert settings.pie_arc == "polygon"
        assert settings.font_assets["NotoSansArabic"].name == "NotoSansArabic-Regular.ttf"

    def test_json_file(self, tmp_path):
        cfg = tmp_path / "dslpdf.json"
        cfg.write_text(json.dumps({"title": "Report", "image_timeout": None}), encoding="utf-8")
        settings = load_settings(cfg)
        assert settings.title == "Report"
        assert settings.image_timeout is None

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        cfg = tmp_path / "dslpdf.yaml"
        cfg.write_text("default_template: report\n", encoding="utf-8")
        monkeypatch.setenv("DSLPDF_TEMPLATE", "minimal")
        monkeypatch.setenv("DSLPDF_FONTS_DIR", "/opt/fonts")
        settings = load_settings(cfg)
        assert settings.default_template == "minimal"
        assert settings.fonts_dir == Path("/opt/fonts")

    def test_keyword_overrides_win_and_none_is_ignored(self, monkeypatch):
        monkeypatch.setenv("DSLPDF_TEMPLATE", "minimal")
        settings = load_settings(default_template="cyrillic", fonts_dir=None)
        assert settings.default_template == "cyrillic"
        assert settings.fonts_dir is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        cfg = tmp_path / "list.yaml"
        cfg.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(cfg)

    def test_invalid_pie_mode_rejected(self):
        with pytest.raises(ValueError):
            load_settings(pie_arc="bezier")
