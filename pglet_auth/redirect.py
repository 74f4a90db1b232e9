# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Post-login redirect allow-list."""

from urllib.parse import urlsplit

from .errors import RedirectNotAllowedError


class RedirectValidator:
    """Validates post-login redirect targets.

    Same-site relative paths are always allowed. Absolute http(s) URLs are
    allowed only when their host is in ``allowed_hosts``.
    """

    def __init__(self, allowed_hosts: list[str] | None = None):
        self.allowed_hosts = {h.strip().lower() for h in (allowed_hosts or []) if h.strip()}

    def validate(self, redirect_url: str | None) -> str:
        """Return the redirect URL if allowed.

        Args:
            redirect_url: Requested redirect target, empty means "/"

        Returns:
            The redirect URL to use

        Raises:
            RedirectNotAllowedError: If the target is not allowed
        """
        if not redirect_url:
            return "/"

        if "\\" in redirect_url or any(ord(c) < 0x20 for c in redirect_url):
            raise RedirectNotAllowedError(f"Redirect URL is malformed: {redirect_url!r}")

        try:
            parts = urlsplit(redirect_url)
            hostname = parts.hostname
        except ValueError as e:
            raise RedirectNotAllowedError(f"Redirect URL is malformed: {redirect_url!r}") from e

        if not parts.scheme and not parts.netloc:
            # "//host" is a scheme-relative absolute URL
            if redirect_url.startswith("/") and not redirect_url.startswith("//"):
                return redirect_url
            raise RedirectNotAllowedError(f"Redirect URL must be an absolute path: {redirect_url!r}")

        if parts.scheme not in ("http", "https"):
            raise RedirectNotAllowedError(f"Redirect URL scheme not allowed: {parts.scheme!r}")

        host = (hostname or "").lower()
        if host not in self.allowed_hosts:
            raise RedirectNotAllowedError(f"Redirect host not allowed: {host!r}")

        return redirect_url
