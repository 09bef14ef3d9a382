"""
Tests for request authorization

Credentials must only ever reach the trusted API host or the current
release's zipball URL.
"""

import pytest

from plugin_updater.update.authorizer import RequestAuthorizer

TOKEN = "ghp_AbC123-def_456"
ZIPBALL = "https://api.github.com/repos/acme/widget/zipball/v3.0.0"


class TestAuthorizeHosts:
    """Tests for host scoping"""

    def test_attaches_to_api_host(self):
        authorizer = RequestAuthorizer(TOKEN)

        headers = authorizer.authorize("https://api.github.com/repos/acme/widget/releases", {})

        assert headers["Authorization"] == f"token {TOKEN}"

    def test_bearer_scheme(self):
        authorizer = RequestAuthorizer(TOKEN, scheme="Bearer")

        headers = authorizer.authorize("https://api.github.com/repos/acme/widget", {})

        assert headers["Authorization"] == f"Bearer {TOKEN}"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/repos/acme/widget",
            "https://github.com/acme/widget",
            "https://codeload.github.com/acme/widget/legacy.zip/v3.0.0",
            "https://api.github.com.evil.com/repos/acme/widget",
            "https://evil.com/?next=https://api.github.com/",
        ],
    )
    def test_never_attaches_to_third_party_host(self, url):
        authorizer = RequestAuthorizer(TOKEN)

        headers = authorizer.authorize(url, {}, zipball_url=ZIPBALL)

        assert "Authorization" not in headers

    def test_url_without_host(self):
        authorizer = RequestAuthorizer(TOKEN)

        assert authorizer.authorize("/repos/acme/widget", {}) == {}

    def test_attaches_to_zipball_prefix(self):
        authorizer = RequestAuthorizer(TOKEN)

        headers = authorizer.authorize(ZIPBALL + "?download=1", {}, zipball_url=ZIPBALL)

        assert headers["Authorization"] == f"token {TOKEN}"

    def test_untrusted_zipball_prefix_is_ignored(self):
        """A zipball URL off the API host never unlocks the credential"""
        authorizer = RequestAuthorizer(TOKEN)
        evil_zipball = "https://evil.com/acme/widget.zip"

        headers = authorizer.authorize(evil_zipball, {}, zipball_url=evil_zipball)

        assert "Authorization" not in headers

    def test_custom_api_host(self):
        authorizer = RequestAuthorizer(TOKEN, api_host="github.example.com")

        assert "Authorization" in authorizer.authorize("https://github.example.com/api/v3/repos", {})
        assert "Authorization" not in authorizer.authorize("https://api.github.com/repos", {})


class TestAuthorizeCredential:
    """Tests for credential validation"""

    @pytest.mark.parametrize("token", [None, ""])
    def test_absent_token(self, token):
        authorizer = RequestAuthorizer(token)

        assert authorizer.authorize("https://api.github.com/repos", {}) == {}

    @pytest.mark.parametrize("token", ["abc def", "abc\n", "abc\nX-Injected: 1", "tok$en", "токен"])
    def test_invalid_token_silently_withheld(self, token):
        authorizer = RequestAuthorizer(token)

        headers = authorizer.authorize("https://api.github.com/repos", {})

        assert "Authorization" not in headers
        assert authorizer.credential is None

    def test_lenient_validation_allows_any_token(self):
        authorizer = RequestAuthorizer("tok$en", strict_token_validation=False)

        headers = authorizer.authorize("https://api.github.com/repos", {})

        assert headers["Authorization"] == "token tok$en"


class TestAuthorizeHeaders:
    """Tests for header handling"""

    def test_existing_headers_preserved(self):
        authorizer = RequestAuthorizer(TOKEN)

        headers = authorizer.authorize("https://api.github.com/x", {"Accept": "application/json"})

        assert headers["Accept"] == "application/json"
        assert "Authorization" in headers

    def test_input_headers_not_mutated(self):
        authorizer = RequestAuthorizer(TOKEN)
        original = {"Accept": "application/json"}

        authorizer.authorize("https://api.github.com/x", original)

        assert original == {"Accept": "application/json"}

    def test_none_headers(self):
        authorizer = RequestAuthorizer(TOKEN)

        headers = authorizer.authorize("https://api.github.com/x", None)

        assert headers == {"Authorization": f"token {TOKEN}"}
