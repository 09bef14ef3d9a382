"""
Tests for plugin header parsing
"""

from plugin_updater.update.plugin_header import parse_plugin_header, read_plugin_data

HEADER = """<?php
/**
 * Plugin Name: Newstyledirect GitHub Plugin Updater
 * Plugin URI: https://github.com/imtbndev/newstyledirect-github-plugin-updater
 * Description: Adds GitHub-based update support for specific plugins.
 * Version: 1.5.2
 * Author: Liam Nguyen
 * Author URI: https://github.com/longnosuke
 * Requires at least: 6.0
 * Tested up to: 6.5
 */

defined('ABSPATH') || exit;
"""


class TestParsePluginHeader:
    """Tests for parse_plugin_header"""

    def test_all_fields(self):
        data = parse_plugin_header(HEADER)

        assert data.name == "Newstyledirect GitHub Plugin Updater"
        assert data.plugin_uri == "https://github.com/imtbndev/newstyledirect-github-plugin-updater"
        assert data.description == "Adds GitHub-based update support for specific plugins."
        assert data.version == "1.5.2"
        assert data.author == "Liam Nguyen"
        assert data.author_uri == "https://github.com/longnosuke"
        assert data.requires_wp == "6.0"
        assert data.tested_up_to == "6.5"

    def test_author_not_confused_with_author_uri(self):
        data = parse_plugin_header("/*\nAuthor URI: https://x.test\nAuthor: Jane\n*/")

        assert data.author == "Jane"
        assert data.author_uri == "https://x.test"

    def test_single_line_comment_close(self):
        data = parse_plugin_header("<?php /* Plugin Name: Tiny */ ?>")

        assert data.name == "Tiny"

    def test_missing_fields_empty(self):
        data = parse_plugin_header("/* Plugin Name: Bare */")

        assert data.version == ""
        assert data.plugin_uri == ""


class TestReadPluginData:
    """Tests for read_plugin_data"""

    def test_reads_file(self, tmp_path):
        plugin_file = tmp_path / "widget.php"
        plugin_file.write_text(HEADER)

        data = read_plugin_data(plugin_file)

        assert data is not None
        assert data.version == "1.5.2"

    def test_missing_file(self, tmp_path):
        assert read_plugin_data(tmp_path / "missing.php") is None

    def test_file_without_name_header(self, tmp_path):
        plugin_file = tmp_path / "lib.php"
        plugin_file.write_text("<?php\n// just a library\n")

        assert read_plugin_data(plugin_file) is None
