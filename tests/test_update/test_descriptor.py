"""
Tests for update decisions and plugin information
"""

import pytest

from plugin_updater.core.config import Settings
from plugin_updater.update.descriptor import UpdateDescriptorBuilder
from plugin_updater.update.models import (
    ComponentIdentity,
    NoUpdate,
    PluginData,
    ReleaseMetadata,
    UpdateDescriptor,
)
from plugin_updater.update.repository import RepositoryReference

ZIPBALL = "https://api.github.com/repos/acme/widget/zipball/v1.1.0"

PLUGIN_DATA = PluginData(
    name="Widget",
    version="1.0.0",
    plugin_uri="https://github.com/acme/widget",
    author="Acme",
    author_uri="https://github.com/acme",
    description="Adds widgets.",
    tested_up_to="6.4",
    requires_wp="6.0",
)


def make_builder(**overrides) -> UpdateDescriptorBuilder:
    return UpdateDescriptorBuilder(Settings(_env_file=None, **overrides), RepositoryReference("acme", "widget"))


def identity(version: str = "1.0.0") -> ComponentIdentity:
    return ComponentIdentity.from_basename("widget/widget.php", installed_version=version)


def release(tag: str = "v1.1.0", zipball: str = ZIPBALL, **extra) -> ReleaseMetadata:
    return ReleaseMetadata(tag_name=tag, zipball_url=zipball, **extra)


class TestBuildUpdate:
    """Tests for update-available decisions"""

    def test_newer_release_produces_descriptor(self):
        result = make_builder().build(identity("1.0.0"), PLUGIN_DATA, release("v1.1.0"))

        assert isinstance(result, UpdateDescriptor)
        assert result.new_version == "1.1.0"
        assert result.slug == "widget"
        assert result.basename == "widget/widget.php"
        assert result.package_url == ZIPBALL
        assert result.homepage_url == "https://github.com/acme/widget"
        assert result.tested_up_to == "6.4"

    def test_descriptor_to_dict_uses_host_field_names(self):
        result = make_builder().build(identity(), PLUGIN_DATA, release())

        assert result.to_dict() == {
            "slug": "widget",
            "plugin": "widget/widget.php",
            "new_version": "1.1.0",
            "tested": "6.4",
            "package": ZIPBALL,
            "url": "https://github.com/acme/widget",
        }

    def test_tested_falls_back_to_host_version(self):
        data = PluginData(name="Widget", version="1.0.0")

        result = make_builder(host_version="6.7").build(identity(), data, release())

        assert result.tested_up_to == "6.7"

    def test_installed_version_prefix_is_cleaned(self):
        result = make_builder().build(identity("v1.0.0"), PLUGIN_DATA, release("v1.1.0"))

        assert isinstance(result, UpdateDescriptor)

    def test_falls_back_to_header_version(self):
        data = PluginData(name="Widget", version="1.2.0")

        result = make_builder().build(identity(""), data, release("v1.1.0"))

        assert isinstance(result, NoUpdate)

    def test_missing_version_everywhere_treated_as_zero(self):
        result = make_builder().build(identity(""), PluginData(name="Widget"), release("v0.0.1"))

        assert isinstance(result, UpdateDescriptor)


class TestBuildNoUpdate:
    """Tests for no-update decisions"""

    def test_older_release(self):
        result = make_builder().build(identity("2.0.0"), PLUGIN_DATA, release("v1.9.0"))

        assert isinstance(result, NoUpdate)
        assert result.basename == "widget/widget.php"
        assert result.plugin_data == PLUGIN_DATA

    def test_same_release(self):
        result = make_builder().build(identity("1.1.0"), PLUGIN_DATA, release("v1.1.0"))

        assert isinstance(result, NoUpdate)

    def test_empty_metadata_is_no_decision(self):
        assert make_builder().build(identity(), PLUGIN_DATA, ReleaseMetadata.empty()) is None

    @pytest.mark.parametrize(
        "installed,tag",
        [("1.0.0", "v2.0.0-beta"), ("1.0.0", "nightly"), ("1.0.0-dev", "v2.0.0"), ("1.0.0", "V2.0.0")],
    )
    def test_malformed_versions_never_propose_update(self, installed, tag):
        assert make_builder().build(identity(installed), PLUGIN_DATA, release(tag)) is None


class TestBuildSecurity:
    """Package URLs must be rooted at the trusted API host"""

    @pytest.mark.parametrize(
        "zipball",
        [
            "",
            "http://api.github.com/repos/acme/widget/zipball/v1.1.0",
            "https://evil.com/repos/acme/widget/zipball/v1.1.0",
            "https://api.github.com.evil.com/zipball",
            "ftp://api.github.com/zipball",
            "https://api.github.com",
        ],
    )
    def test_untrusted_package_rejected(self, zipball):
        assert make_builder().build(identity(), PLUGIN_DATA, release(zipball=zipball)) is None


class TestSanitization:
    """Tests for output sanitization"""

    def test_fields_sanitized(self):
        ident = ComponentIdentity(slug="Widget<b>", basename="widget/widget.php", installed_version="1.0.0")
        data = PluginData(name="Widget", version="1.0.0", tested_up_to="<script>x</script>6.4\n")

        result = make_builder().build(ident, data, release())

        assert result.slug == "widgetb"
        assert result.tested_up_to == "x6.4"

    def test_sanitization_can_be_disabled(self):
        ident = ComponentIdentity(slug="Widget<b>", basename="widget/widget.php", installed_version="1.0.0")

        result = make_builder(sanitize_output_fields=False).build(ident, PLUGIN_DATA, release())

        assert result.slug == "Widget<b>"


class TestPluginInformation:
    """Tests for the plugin details dialog"""

    def test_information_for_own_slug(self):
        meta = release(published_at="2025-01-02T00:00:00Z", body="* Fixed things")

        info = make_builder().build_plugin_information(identity(), PLUGIN_DATA, meta, "plugin_information", "widget")

        assert info.name == "Widget"
        assert info.slug == "widget"
        assert info.version == "1.1.0"
        assert info.requires == "6.0"
        assert info.last_updated == "2025-01-02T00:00:00Z"
        assert info.sections["Updates"] == "* Fixed things"
        assert info.sections["Description"] == "Adds widgets."
        assert info.download_link == ZIPBALL

    def test_default_section_text(self):
        data = PluginData(name="Widget", version="1.0.0")

        info = make_builder().build_plugin_information(identity(), data, release(), "plugin_information", "widget")

        assert info.sections == {
            "Description": "No description available.",
            "Updates": "No update details available.",
        }

    @pytest.mark.parametrize("action,slug", [("query_plugins", "widget"), ("plugin_information", "other"), ("plugin_information", None)])
    def test_other_requests_ignored(self, action, slug):
        info = make_builder().build_plugin_information(identity(), PLUGIN_DATA, release(), action, slug)

        assert info is None

    def test_no_release_no_information(self):
        info = make_builder().build_plugin_information(
            identity(), PLUGIN_DATA, ReleaseMetadata.empty(), "plugin_information", "widget"
        )

        assert info is None
