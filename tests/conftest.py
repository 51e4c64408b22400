"""
Global test configuration with support for different test types.
"""

from collections.abc import Callable, Generator
from contextlib import contextmanager
import logging
import os
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from sf_profile_full.config import FrozenConfig

# --- Environment Isolation (Autouse) ---


@pytest.fixture(autouse=True)
def isolate_sf_profile_env(request, monkeypatch):
    """Ensure a clean SF_PROFILE_* environment for each test.

    - Removes all SF_PROFILE_* variables and the DEBUG toggle before each test
    - Leaves other variables intact for stability

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("SF_PROFILE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_config_files(request, monkeypatch, tmp_path):
    """Point both config file locations at isolated temp paths by default.

    Prevents reading a developer's real ~/.config/sf_profile_full.toml or
    this repository's pyproject.toml during tests.
    """
    if request.node.get_closest_marker("allow_real_config_files"):
        return

    isolated = tmp_path / "config_isolated"
    isolated.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("SF_PROFILE_CONFIG_HOME", str(isolated / "sf_profile_full.toml"))
    monkeypatch.setenv("SF_PROFILE_PYPROJECT_PATH", str(isolated / "pyproject.toml"))


@pytest.fixture
def isolated_config_sources(tmp_path):
    """Completely isolate configuration sources for testing.

    Returns a helper that writes the given TOML content and environment,
    so only explicitly provided configuration is seen.
    """

    @contextmanager
    def _setup(
        *,
        pyproject_content: str = "",
        home_content: str = "",
        env_vars: dict[str, str] | None = None,
    ) -> Generator[None]:
        """Set up isolated config sources with specific content.

        Args:
            pyproject_content: TOML content for the pyproject file
            home_content: TOML content for the home config file
            env_vars: Environment variables (SF_PROFILE_ prefix added automatically)
        """
        clean_env = {k: v for k, v in os.environ.items() if not k.startswith("SF_PROFILE_")}
        for key, value in (env_vars or {}).items():
            if not key.startswith("SF_PROFILE_"):
                key = f"SF_PROFILE_{key.upper()}"
            clean_env[key] = value

        project_dir = tmp_path / "project"
        project_dir.mkdir(exist_ok=True)
        pyproject_path = project_dir / "pyproject.toml"

        home_dir = tmp_path / "home"
        home_dir.mkdir(exist_ok=True)
        home_config_path = home_dir / "sf_profile_full.toml"

        if pyproject_content:
            pyproject_path.write_text(pyproject_content)
        if home_content:
            home_config_path.write_text(home_content)

        clean_env["SF_PROFILE_PYPROJECT_PATH"] = str(pyproject_path)
        clean_env["SF_PROFILE_CONFIG_HOME"] = str(home_config_path)

        with patch.dict(os.environ, clean_env, clear=True):
            yield

    return _setup


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with a mocked org",
        "allow_env_pollution: Keep SF_PROFILE_* variables from the real environment",
        "allow_real_config_files: Read real pyproject.toml and home config",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


def profile_record(full_name: str, **fields: Any) -> dict[str, Any]:
    """A raw readMetadata record shaped like the SOAP client's output."""
    record: dict[str, Any] = {"$": {"xsi:type": "Profile"}, "fullName": full_name}
    record.update(fields or {"custom": "false"})
    return record


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    """Factory for raw Profile records."""
    return profile_record


@pytest.fixture
def fake_org() -> Callable[..., AsyncMock]:
    """Build a mock metadata connection backed by a dict of records.

    ``read`` returns the known records for the requested names, as a bare
    record when only one matches (as the API does) and ``None`` for none.
    """

    def _build(records: dict[str, dict[str, Any]]) -> AsyncMock:
        async def read(_type_name: str, names: list[str]) -> Any:
            found = [records[n] for n in names if n in records]
            if not found:
                return None
            return found[0] if len(found) == 1 else found

        async def list_(_type_name: str) -> Any:
            return [{"fullName": name, "type": "Profile"} for name in records]

        connection = AsyncMock()
        connection.read.side_effect = read
        connection.list.side_effect = list_
        return connection

    return _build


@pytest.fixture
def frozen_config(tmp_path) -> Callable[..., FrozenConfig]:
    """Factory for a FrozenConfig writing into the test's temp directory."""

    def _build(**overrides: Any) -> FrozenConfig:
        values: dict[str, Any] = {
            "instance_url": "https://example.my.salesforce.com",
            "access_token": "00D-test-token",
            "api_version": "62.0",
            "timeout": 5.0,
            "batch_size": 10,
            "output_dir": str(tmp_path / "profiles"),
            "clean": False,
        }
        values.update(overrides)
        return FrozenConfig(**values)

    return _build


@pytest.fixture
def profiles_dir(tmp_path) -> Path:
    """Directory the default frozen config writes profiles into."""
    return tmp_path / "profiles"
