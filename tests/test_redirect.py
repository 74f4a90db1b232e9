# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Tests for the post-login redirect allow-list."""

import pytest

from pglet_auth.errors import RedirectNotAllowedError
from pglet_auth.redirect import RedirectValidator


@pytest.fixture
def validator():
    return RedirectValidator(allowed_hosts=["App.Example.com", " "])


class TestRedirectValidator:
    """Tests for RedirectValidator."""

    @pytest.mark.parametrize("url", [None, ""])
    def test_empty_defaults_to_root(self, validator, url):
        """Test an empty redirect goes to the site root."""
        assert validator.validate(url) == "/"

    @pytest.mark.parametrize("url", ["/", "/app", "/my-account/page?x=1#top"])
    def test_relative_paths_allowed(self, validator, url):
        """Test same-site paths are allowed."""
        assert validator.validate(url) == url

    @pytest.mark.parametrize("url", [
        "https://app.example.com/dashboard",
        "http://app.example.com:8080/",
        "https://APP.example.com",
    ])
    def test_allow_listed_hosts_allowed(self, validator, url):
        """Test absolute URLs on allow-listed hosts are allowed."""
        assert validator.validate(url) == url

    @pytest.mark.parametrize("url", [
        "//evil.com/path",
        "https://evil.com/",
        "https://app.example.com.evil.com/",
        "javascript:alert(1)",
        "ftp://app.example.com/file",
        "relative/path",
        "/\\evil.com",
        "/app\r\nSet-Cookie: x=y",
        "http://[::1",
    ])
    def test_disallowed_targets_rejected(self, validator, url):
        """Test open-redirect targets are rejected."""
        with pytest.raises(RedirectNotAllowedError):
            validator.validate(url)

    def test_no_allowed_hosts_rejects_absolute(self):
        """Test absolute URLs are rejected without an allow-list."""
        with pytest.raises(RedirectNotAllowedError):
            RedirectValidator().validate("https://app.example.com/")

    def test_blank_hosts_ignored(self, validator):
        """Test blank allow-list entries are dropped."""
        assert validator.allowed_hosts == {"app.example.com"}
