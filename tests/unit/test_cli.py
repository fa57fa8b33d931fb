"""Tests for the typer command line interface."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from pytest_mock import MockerFixture
from typer.testing import CliRunner

from scrobblefetch.application.services import TrackSyncService
from scrobblefetch.cli import app
from scrobblefetch.config import get_settings
from scrobblefetch.domain.exceptions import ApiError
from scrobblefetch.domain.value_objects import Period, ResourceKind

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Configured environment with a fresh settings cache."""
    monkeypatch.delenv("LAST_FM_API_KEY", raising=False)
    monkeypatch.setenv("LASTFM_API_KEY", "test-key")
    monkeypatch.setenv("LASTFM_USERNAME", "someone")
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCheckConfig:
    """Test the check-config command."""

    def test_configured(self) -> None:
        """All variables set -> exit 0."""
        result = runner.invoke(app, ["check-config"])

        assert result.exit_code == 0
        assert "Configuration OK" in result.output

    def test_missing_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing key -> exit 1 naming the variable."""
        monkeypatch.delenv("LASTFM_API_KEY")
        get_settings.cache_clear()

        result = runner.invoke(app, ["check-config"])

        assert result.exit_code == 1
        assert "LASTFM_API_KEY" in result.output


class TestFetchCommands:
    """Test recent/loved/top/update commands."""

    def test_recent_saves_and_prints_path(self, mocker: MockerFixture) -> None:
        """recent delegates to fetch_and_save and echoes the file path."""
        save = mocker.patch.object(
            TrackSyncService,
            "fetch_and_save",
            new_callable=AsyncMock,
            return_value="data/recent_tracks_20240101_000000.csv",
        )

        result = runner.invoke(app, ["recent", "--limit", "100", "--format", "csv"])

        assert result.exit_code == 0, result.output
        assert "recent_tracks_20240101_000000.csv" in result.output
        save.assert_awaited_once_with(ResourceKind.RECENT_PLAYS, 100, "csv")

    def test_top_with_period(self, mocker: MockerFixture) -> None:
        """--period is parsed into the Period enum."""
        save = mocker.patch.object(
            TrackSyncService, "fetch_and_save", new_callable=AsyncMock, return_value="x.json"
        )

        result = runner.invoke(app, ["top", "--period", "7day"])

        assert result.exit_code == 0, result.output
        save.assert_awaited_once_with(ResourceKind.TOP_TRACKS, None, "json", period=Period.WEEK)

    def test_update_loved(self, mocker: MockerFixture) -> None:
        """update passes the file and kind through."""
        update = mocker.patch.object(
            TrackSyncService, "update_file", new_callable=AsyncMock, return_value="loved.json"
        )

        result = runner.invoke(app, ["update", "loved.json", "--kind", "loved"])

        assert result.exit_code == 0, result.output
        update.assert_awaited_once_with("loved.json", ResourceKind.LOVED_TRACKS)

    def test_domain_error_exits_1(self, mocker: MockerFixture) -> None:
        """A DomainException becomes exit code 1 and a one-line message."""
        mocker.patch.object(
            TrackSyncService,
            "fetch_and_save",
            new_callable=AsyncMock,
            side_effect=ApiError(6, "User not found"),
        )

        result = runner.invoke(app, ["loved"])

        assert result.exit_code == 1
        assert "Last.fm API error 6: User not found" in result.output

    def test_unconfigured_fails_before_fetch(
        self, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Missing username -> exit 1 without touching the fetcher."""
        monkeypatch.delenv("LASTFM_USERNAME")
        get_settings.cache_clear()
        save = mocker.patch.object(TrackSyncService, "fetch_and_save", new_callable=AsyncMock)

        result = runner.invoke(app, ["recent"])

        assert result.exit_code == 1
        assert "LASTFM_USERNAME" in result.output
        save.assert_not_awaited()


class TestNowPlayingCommand:
    """Test the now-playing command."""

    def test_idle(self, mocker: MockerFixture) -> None:
        """Nothing playing -> friendly message, exit 0."""
        mocker.patch.object(
            TrackSyncService, "now_playing", new_callable=AsyncMock, return_value=None
        )

        result = runner.invoke(app, ["now-playing"])

        assert result.exit_code == 0, result.output
        assert "Nothing playing" in result.output

    def test_output_file(self, mocker: MockerFixture, tmp_path: Path) -> None:
        """--output routes through write_now_playing."""
        write = mocker.patch.object(
            TrackSyncService, "write_now_playing", new_callable=AsyncMock, return_value=None
        )
        target = tmp_path / "np.json"

        result = runner.invoke(app, ["now-playing", "--output", str(target)])

        assert result.exit_code == 0, result.output
        write.assert_awaited_once_with(str(target))
