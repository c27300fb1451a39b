"""Tests for settings loading — defaults, YAML files, profiles, validation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from releval.config import DEFAULT_MEASURES, AlignmentSettings, Settings, load_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.alignment.max_items_per_query == sys.maxsize
        assert settings.alignment.relevance_threshold == 1
        assert settings.alignment.judged_docs_only is False
        assert settings.evaluation.measures == DEFAULT_MEASURES
        assert settings.evaluation.per_query is False

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            AlignmentSettings(relevance_threshold=-1)

    def test_zero_max_items_rejected(self):
        with pytest.raises(ValidationError):
            AlignmentSettings(max_items_per_query=0)


class TestLoadSettings:
    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("RELEVAL_PROFILE", raising=False)
        assert load_settings() == Settings()

    def test_explicit_path(self, tmp_path: Path):
        p = tmp_path / "custom.yaml"
        p.write_text(
            "alignment:\n"
            "  relevance_threshold: 2\n"
            "  judged_docs_only: true\n"
            "evaluation:\n"
            "  measures: [P.5, ndcg_p]\n"
        )
        settings = load_settings(p)
        assert settings.alignment.relevance_threshold == 2
        assert settings.alignment.judged_docs_only is True
        assert settings.evaluation.measures == ["P.5", "ndcg_p"]

    def test_found_in_parent_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / "settings.yaml").write_text("alignment:\n  max_items_per_query: 50\n")
        child = tmp_path / "runs" / "2024"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        monkeypatch.delenv("RELEVAL_PROFILE", raising=False)
        assert load_settings().alignment.max_items_per_query == 50

    def test_profile_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / "settings.yaml").write_text("alignment:\n  relevance_threshold: 1\n")
        (tmp_path / "settings-graded.yaml").write_text("alignment:\n  relevance_threshold: 3\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("RELEVAL_PROFILE", "graded")
        assert load_settings().alignment.relevance_threshold == 3

    def test_empty_file(self, tmp_path: Path):
        p = tmp_path / "settings.yaml"
        p.write_text("")
        assert load_settings(p) == Settings()

    def test_explicit_missing_path_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Settings file not found"):
            load_settings(tmp_path / "absent.yaml")

    def test_non_mapping_rejected(self, tmp_path: Path):
        p = tmp_path / "settings.yaml"
        p.write_text("- P\n- ndcg_p\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_settings(p)
