# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Typed settings with documented defaults.

``Settings`` is built once at startup by ``load_settings`` and passed to the
components that need it. Unset optional values read as empty/zero.
"""

import hashlib
import hmac
from pathlib import Path
from typing import Mapping, Optional

from .config import ConfigProvider, EnvConfigProvider, FileConfigProvider, LayeredConfigProvider, find_config_file
from .log import create_logger

logger = create_logger(name="pglet_auth.settings")

# general
SERVER_PORT = "SERVER_PORT"
FORCE_SSL = "FORCE_SSL"
WS_MAX_MESSAGE_SIZE = "WS_MAX_MESSAGE_SIZE"
PUBLIC_URL = "PUBLIC_URL"

# pages/sessions
PAGE_LIFETIME_MINUTES = "PAGE_LIFETIME_MINUTES"
APP_LIFETIME_MINUTES = "APP_LIFETIME_MINUTES"
CHECK_PAGE_IP = "CHECK_PAGE_IP"
LIMIT_PAGES_PER_HOUR = "LIMIT_PAGES_PER_HOUR"
LIMIT_SESSIONS_PER_HOUR = "LIMIT_SESSIONS_PER_HOUR"
LIMIT_SESSION_SIZE_BYTES = "LIMIT_SESSION_SIZE_BYTES"
RESERVED_ACCOUNT_NAMES = "RESERVED_ACCOUNT_NAMES"
RESERVED_PAGE_NAMES = "RESERVED_PAGE_NAMES"
ALLOW_REMOTE_HOST_CLIENTS = "ALLOW_REMOTE_HOST_CLIENTS"
HOST_CLIENTS_AUTH_TOKEN = "HOST_CLIENTS_AUTH_TOKEN"

# redis
REDIS_ADDR = "REDIS.ADDR"
REDIS_PASSWORD = "REDIS.PASSWORD"
REDIS_MAX_IDLE = "REDIS.MAX_IDLE"
REDIS_MAX_ACTIVE = "REDIS.MAX_ACTIVE"

# auth
COOKIE_NAME = "COOKIE_NAME"
COOKIE_SECRETS = "COOKIE_SECRETS"
GOOGLE_CLIENT_ID = "GOOGLE_CLIENT_ID"
GOOGLE_CLIENT_SECRET = "GOOGLE_CLIENT_SECRET"
GITHUB_CLIENT_ID = "GITHUB_CLIENT_ID"
GITHUB_CLIENT_SECRET = "GITHUB_CLIENT_SECRET"
AZURE_CLIENT_ID = "AZURE_CLIENT_ID"
AZURE_CLIENT_SECRET = "AZURE_CLIENT_SECRET"
AZURE_TENANT = "AZURE_TENANT"
OAUTH_STATE_TTL_SECONDS = "OAUTH_STATE_TTL_SECONDS"
OAUTH_HTTP_TIMEOUT_SECONDS = "OAUTH_HTTP_TIMEOUT_SECONDS"
REDIRECT_ALLOWED_HOSTS = "REDIRECT_ALLOWED_HOSTS"

# security
MASTER_SECRET_KEY = "MASTER_SECRET_KEY"

# logging
LOG_LEVEL = "LOG_LEVEL"

DEFAULT_SERVER_PORT = 5000
DEFAULT_WS_MAX_MESSAGE_SIZE = 65535
DEFAULT_PAGE_LIFETIME_MINUTES = 1440
DEFAULT_APP_LIFETIME_MINUTES = 60
DEFAULT_REDIS_MAX_IDLE = 5
DEFAULT_REDIS_MAX_ACTIVE = 10
DEFAULT_COOKIE_NAME = "pglet"
DEFAULT_COOKIE_SECRETS = ["secret_hash secret_encrypt"]
# Label mixed into the master secret when deriving the session cookie key
COOKIE_KEY_LABEL = b"pglet-auth session cookie"
DEFAULT_AZURE_TENANT = "common"
DEFAULT_OAUTH_STATE_TTL_SECONDS = 600
DEFAULT_OAUTH_HTTP_TIMEOUT_SECONDS = 10.0

_DEFAULT_COOKIE_HASH_KEYS = {s.split()[0] for s in DEFAULT_COOKIE_SECRETS}

PROVIDER_NAMES = ("github", "google", "azure")

_CLIENT_CREDENTIAL_KEYS = {
    "google": (GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET),
    "github": (GITHUB_CLIENT_ID, GITHUB_CLIENT_SECRET),
    "azure": (AZURE_CLIENT_ID, AZURE_CLIENT_SECRET),
}


class Settings:
    """Named, typed settings backed by a configuration provider."""

    def __init__(self, provider: ConfigProvider):
        self._provider = provider

    # general

    @property
    def server_port(self) -> int:
        return self._provider.get_int(SERVER_PORT, DEFAULT_SERVER_PORT)

    @property
    def force_ssl(self) -> bool:
        return self._provider.get_bool(FORCE_SSL)

    @property
    def ws_max_message_size(self) -> int:
        return self._provider.get_int(WS_MAX_MESSAGE_SIZE, DEFAULT_WS_MAX_MESSAGE_SIZE)

    @property
    def public_url(self) -> str:
        """Externally visible base URL, used to build OAuth redirect URLs."""
        return self._provider.get_str(PUBLIC_URL).rstrip("/")

    # pages/sessions

    @property
    def page_lifetime_minutes(self) -> int:
        return self._provider.get_int(PAGE_LIFETIME_MINUTES, DEFAULT_PAGE_LIFETIME_MINUTES)

    @property
    def app_lifetime_minutes(self) -> int:
        return self._provider.get_int(APP_LIFETIME_MINUTES, DEFAULT_APP_LIFETIME_MINUTES)

    @property
    def check_page_ip(self) -> bool:
        # unauthenticated clients only
        return self._provider.get_bool(CHECK_PAGE_IP)

    @property
    def limit_pages_per_hour(self) -> int:
        return self._provider.get_int(LIMIT_PAGES_PER_HOUR)

    @property
    def limit_sessions_per_hour(self) -> int:
        return self._provider.get_int(LIMIT_SESSIONS_PER_HOUR)

    @property
    def limit_session_size_bytes(self) -> int:
        return self._provider.get_int(LIMIT_SESSION_SIZE_BYTES)

    @property
    def reserved_account_names(self) -> list[str]:
        return self._provider.get_list(RESERVED_ACCOUNT_NAMES)

    @property
    def reserved_page_names(self) -> list[str]:
        return self._provider.get_list(RESERVED_PAGE_NAMES)

    @property
    def allow_remote_host_clients(self) -> bool:
        return self._provider.get_bool(ALLOW_REMOTE_HOST_CLIENTS)

    @property
    def host_clients_auth_token(self) -> str:
        return self._provider.get_str(HOST_CLIENTS_AUTH_TOKEN)

    # redis

    @property
    def redis_addr(self) -> str:
        return self._provider.get_str(REDIS_ADDR)

    @property
    def redis_password(self) -> str:
        return self._provider.get_str(REDIS_PASSWORD)

    @property
    def redis_max_idle(self) -> int:
        return self._provider.get_int(REDIS_MAX_IDLE, DEFAULT_REDIS_MAX_IDLE)

    @property
    def redis_max_active(self) -> int:
        return self._provider.get_int(REDIS_MAX_ACTIVE, DEFAULT_REDIS_MAX_ACTIVE)

    # auth

    @property
    def cookie_name(self) -> str:
        return self._provider.get_str(COOKIE_NAME, DEFAULT_COOKIE_NAME)

    @property
    def cookie_secrets(self) -> list[str]:
        return self._provider.get_list(COOKIE_SECRETS, DEFAULT_COOKIE_SECRETS)

    @property
    def cookie_signing_key(self) -> str:
        """Key that signs session cookies.

        The hash key of the first ``COOKIE_SECRETS`` entry. When the list is
        empty or still holds the well-known default, the key is derived from
        ``MASTER_SECRET_KEY`` instead. Empty when neither is set.
        """
        secrets = [s for s in self.cookie_secrets if s.split()]
        if secrets and secrets[0].split()[0] not in _DEFAULT_COOKIE_HASH_KEYS:
            return secrets[0].split()[0]
        if not self.master_secret_key:
            return ""
        return hmac.new(self.master_secret_key.encode("utf-8"), COOKIE_KEY_LABEL, hashlib.sha256).hexdigest()

    @property
    def azure_tenant(self) -> str:
        return self._provider.get_str(AZURE_TENANT, DEFAULT_AZURE_TENANT)

    @property
    def oauth_state_ttl_seconds(self) -> int:
        return self._provider.get_int(OAUTH_STATE_TTL_SECONDS, DEFAULT_OAUTH_STATE_TTL_SECONDS)

    @property
    def oauth_http_timeout_seconds(self) -> float:
        return self._provider.get_float(OAUTH_HTTP_TIMEOUT_SECONDS, DEFAULT_OAUTH_HTTP_TIMEOUT_SECONDS)

    @property
    def redirect_allowed_hosts(self) -> list[str]:
        return self._provider.get_list(REDIRECT_ALLOWED_HOSTS)

    def client_credentials(self, provider: str) -> tuple[str, str]:
        """Return the (client_id, client_secret) pair of a provider.

        Providers without a built-in entry read ``<NAME>_CLIENT_ID`` and
        ``<NAME>_CLIENT_SECRET``. Unset values yield empty strings.
        """
        prefix = provider.upper()
        keys = _CLIENT_CREDENTIAL_KEYS.get(provider, (f"{prefix}_CLIENT_ID", f"{prefix}_CLIENT_SECRET"))
        return self._provider.get_str(keys[0]), self._provider.get_str(keys[1])

    def enabled_providers(self) -> list[str]:
        """List providers whose client id and secret are both set."""
        return [name for name in PROVIDER_NAMES if all(self.client_credentials(name))]

    # security

    @property
    def master_secret_key(self) -> str:
        return self._provider.get_str(MASTER_SECRET_KEY)

    # logging

    @property
    def log_level(self) -> str:
        return self._provider.get_str(LOG_LEVEL, "INFO").upper()

    def validate(self) -> None:
        """Check settings the process cannot run without.

        Raises:
            ValueError: If the master secret key is empty
        """
        if not self.master_secret_key:
            raise ValueError(
                f"{MASTER_SECRET_KEY} is not set. "
                "Set PGLET_MASTER_SECRET_KEY or add it to config.yaml"
            )


def load_settings(
    config_path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from the config file overlaid by the environment.

    Args:
        config_path: Explicit config file; searched for when omitted
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Settings instance
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is not None:
        logger.info("Loading configuration file", path=str(path))

    provider = LayeredConfigProvider(
        EnvConfigProvider(environ=environ),
        FileConfigProvider(path),
    )
    return Settings(provider)
