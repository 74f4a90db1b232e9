# SPDX-License-Identifier: MIT
# Copyright (c) 2025 pglet-auth contributors

"""Shared fixtures for pglet_auth tests."""

from typing import Callable

import pytest

from pglet_auth.settings import Settings
from tests.fakes import FakeProviderAPI, build_settings


@pytest.fixture
def settings() -> Settings:
    """Settings with all built-in providers configured."""
    return build_settings()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for settings with overrides."""
    return build_settings


@pytest.fixture
def provider_api() -> FakeProviderAPI:
    """Fake provider API with no routes."""
    return FakeProviderAPI()
