"""Tests for triagekit.core.config."""

from __future__ import annotations

import pytest

from triagekit.analysis.pipeline import DEFAULT_ORDER
from triagekit.core.config import TriageConfig, load_config
from triagekit.core.errors import ConfigError
from triagekit.models.error import ErrorCode


class TestLoadConfig:
    """YAML loading and validation."""

    def test_defaults_without_path(self) -> None:
        config = load_config(None)
        assert config.analyzers == list(DEFAULT_ORDER)
        assert config.ioc_file is None
        assert config.hostname is None
        assert config.timeline_limit is None

    def test_full_file(self, tmp_path) -> None:
        path = tmp_path / "triage.yaml"
        path.write_text(
            "analyzers:\n"
            "  - persistence_anomaly\n"
            "  - suspicious_process\n"
            "ioc_file: iocs.txt\n"
            "hostname: mac-lab-01\n"
            "timeline_limit: 25\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.analyzers == ["persistence_anomaly", "suspicious_process"]
        assert config.ioc_file == tmp_path / "iocs.txt"
        assert config.hostname == "mac-lab-01"
        assert config.timeline_limit == 25

    def test_absolute_ioc_path_kept(self, tmp_path) -> None:
        ioc_path = tmp_path / "lists" / "iocs.txt"
        path = tmp_path / "triage.yaml"
        path.write_text(f"ioc_file: {ioc_path}\n", encoding="utf-8")
        assert load_config(path).ioc_file == ioc_path

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == TriageConfig()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "nope.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_NOT_FOUND

    @pytest.mark.parametrize(
        "content",
        [
            "analyzers: [ioc_matcher]\n",
            "analyzers: [network_anomaly, network_anomaly]\n",
            "timeline_limit: 0\n",
            "unknown_key: 1\n",
            "- just\n- a list\n",
            "analyzers: [unclosed\n",
            "1: foo\n",
        ],
    )
    def test_invalid(self, tmp_path, content) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.error.context == {"path": str(path)}
