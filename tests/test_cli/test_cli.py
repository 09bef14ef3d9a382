"""
Tests for the command-line interface
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from plugin_updater.cli import main
from plugin_updater.core.config import reset_settings
from plugin_updater.update.cache import cache_key
from plugin_updater.update.fetcher import MetadataFetcher
from plugin_updater.update.models import ReleaseMetadata

RELEASE = ReleaseMetadata(
    tag_name="v3.0.0",
    zipball_url="https://api.github.com/repos/acme/widget/zipball/v3.0.0",
    published_at="2024-05-01T10:00:00Z",
    body="Bug fixes.",
)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("PLUGIN_UPDATER_DATA", str(tmp_path / "data"))
    monkeypatch.delenv("PLUGIN_UPDATER_REPOSITORY", raising=False)
    monkeypatch.delenv("PLUGIN_UPDATER_AUTH_TOKEN", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def runner():
    return CliRunner()


def write_plugin(tmp_path, uri: str = "https://github.com/acme/widget"):
    plugin_file = tmp_path / "plugins" / "widget" / "widget.php"
    plugin_file.parent.mkdir(parents=True)
    plugin_file.write_text(
        "<?php\n/**\n * Plugin Name: Widget\n"
        f" * Plugin URI: {uri}\n"
        " * Version: 2.5.1\n */\n"
    )
    return plugin_file


class TestCacheKeyCommand:
    """Tests for the cache-key command"""

    def test_prints_key(self, runner):
        result = runner.invoke(main, ["cache-key", "widget"])

        assert result.exit_code == 0
        assert result.output.strip() == cache_key("widget")


class TestCheckCommand:
    """Tests for the check command"""

    def test_update_available(self, runner, tmp_path):
        plugin_file = write_plugin(tmp_path)

        with patch.object(MetadataFetcher, "fetch", return_value=RELEASE):
            result = runner.invoke(main, ["check", str(plugin_file), "--no-cache"])

        assert result.exit_code == 0
        assert "Update available" in result.output
        assert "3.0.0" in result.output

    def test_up_to_date(self, runner, tmp_path):
        plugin_file = write_plugin(tmp_path)

        with patch.object(MetadataFetcher, "fetch", return_value=RELEASE):
            result = runner.invoke(main, ["check", str(plugin_file), "--installed-version", "3.0.0"])

        assert result.exit_code == 0
        assert "up to date" in result.output

    def test_no_release_information(self, runner, tmp_path):
        plugin_file = write_plugin(tmp_path)

        with patch.object(MetadataFetcher, "fetch", return_value=ReleaseMetadata.empty()):
            result = runner.invoke(main, ["check", str(plugin_file), "--repo", "acme/other"])

        assert result.exit_code == 0
        assert "No release information available" in result.output

    def test_no_repository(self, runner, tmp_path):
        plugin_file = write_plugin(tmp_path, uri="https://example.com/widget")

        with patch.object(MetadataFetcher, "fetch") as fetch:
            result = runner.invoke(main, ["check", str(plugin_file)])

        assert result.exit_code == 0
        assert "remote tracking disabled" in result.output
        fetch.assert_not_called()

    def test_missing_plugin_file(self, runner, tmp_path):
        result = runner.invoke(main, ["check", str(tmp_path / "missing.php")])

        assert result.exit_code == 1
        assert "not found" in result.output


    def test_unwritable_data_directory(self, runner, tmp_path, monkeypatch):
        plugin_file = write_plugin(tmp_path)
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setenv("PLUGIN_UPDATER_DATA", str(blocker / "data"))

        result = runner.invoke(main, ["check", str(plugin_file)])

        assert result.exit_code == 1
        assert "Cannot create data directory" in result.output


class TestInfoCommand:
    """Tests for the info command"""

    def test_shows_release_details(self, runner, tmp_path):
        plugin_file = write_plugin(tmp_path)

        with patch.object(MetadataFetcher, "fetch", return_value=RELEASE):
            result = runner.invoke(main, ["info", str(plugin_file)])

        assert result.exit_code == 0
        assert "3.0.0" in result.output
        assert "Bug fixes." in result.output
