"""Tests for triagekit.analysis.process -- suspicious running processes."""

from __future__ import annotations

import pytest

from triagekit.analysis.process import SuspiciousProcessAnalyzer


@pytest.fixture
def analyzer() -> SuspiciousProcessAnalyzer:
    return SuspiciousProcessAnalyzer()


class TestSuspiciousProcess:
    """Individual rules and their combination."""

    def test_root_nc_from_tmp(self, analyzer, make_artifact) -> None:
        """exe in /tmp + nc + root in a user home: 30 + 20 + 25."""
        artifact = make_artifact(
            "running_process",
            {"exe": "/tmp/evil", "name": "nc", "username": "root", "cwd": "/Users/bob"},
        )
        analyzer.analyze([artifact])
        assert artifact.risk_score == 75
        assert artifact.tags == ["exe_in_tmp", "suspicious_name:nc", "root_in_user_dir"]

    @pytest.mark.parametrize(
        "exe", ["/tmp/x", "/var/tmp/x", "/private/tmp/x", "/private/var/tmp/x"]
    )
    def test_exe_in_tmp_prefixes(self, analyzer, make_artifact, exe) -> None:
        artifact = make_artifact("running_process", {"exe": exe, "name": "x"})
        analyzer.analyze([artifact])
        assert "exe_in_tmp" in artifact.tags

    def test_tmp_must_be_prefix(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("running_process", {"exe": "/opt/tmp/x", "name": "x"})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_suspicious_name_uses_base_name(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "running_process", {"exe": "/usr/bin/Python", "name": "/usr/bin/Python"}
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["suspicious_name:Python"]
        assert artifact.risk_score == 20

    def test_no_exe_path(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("running_process", {"name": "launchd"})
        analyzer.analyze([artifact])
        assert artifact.tags == ["no_exe_path"]
        assert artifact.risk_score == 15

    def test_empty_record_scores_nothing(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("running_process", {})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0
        assert artifact.tags == []

    def test_hidden_process(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("running_process", {"exe": "/usr/local/.x", "name": ".x"})
        analyzer.analyze([artifact])
        assert artifact.tags == ["hidden_process"]
        assert artifact.risk_score == 20

    def test_root_requires_root_user(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "running_process",
            {"exe": "/Users/bob/bin/tool", "name": "tool", "username": "bob"},
        )
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_other_types_ignored(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("network_connection", {"exe": "/tmp/evil", "name": "nc"})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_non_string_fields_do_not_raise(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "running_process", {"exe": None, "name": 42, "username": ["root"], "cwd": {}}
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["no_exe_path"]

    def test_adds_to_existing_score(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("running_process", {"name": "nc"}, risk_score=5, tags=["prior"])
        analyzer.analyze([artifact])
        assert artifact.risk_score == 5 + 20 + 15
        assert artifact.tags == ["prior", "suspicious_name:nc", "no_exe_path"]
