"""Tests for the YAML cascade and command-line overrides."""

from __future__ import annotations

from pathlib import Path

import pydantic as p
import pytest

import lectern
from lectern.core import Settings
from lectern.model import DeploymentEnvironment

ConfigRoot = p.FileUrl(f"file://{Path(lectern.__file__).resolve().parent.parent / 'config'}")


def load(env: DeploymentEnvironment, *override: str) -> Settings:
    return Settings(env=env, root=ConfigRoot, override=override)


class TestCascade(object):
    def test_local_reads_root_files_only(self) -> None:
        settings = load(DeploymentEnvironment.Local)

        assert settings.storage.records.backend == "sql"
        assert settings.web.market.auth.bcrypt_rounds == 10

    def test_environment_overlay_merges_over_root(self) -> None:
        """The test overlay changes only the keys it names."""
        settings = load(DeploymentEnvironment.Test)

        assert settings.storage.records.backend == "memory"
        assert settings.web.market.auth.bcrypt_rounds == 4
        assert settings.web.market.auth.access_token_expire_minutes == 60
        assert settings.web.market.backend.port == 8000


class TestOverride(object):
    def test_override_wins_over_yaml(self) -> None:
        settings = load(
            DeploymentEnvironment.Test,
            "web.market.auth.bcrypt_rounds=6",
            "storage.records.backend=sql",
        )

        assert settings.web.market.auth.bcrypt_rounds == 6
        assert settings.storage.records.backend == "sql"
        assert settings.storage.records.sql is not None
        assert settings.storage.records.sql.database == "lectern.db"

    def test_malformed_override(self) -> None:
        with pytest.raises(ValueError):
            load(DeploymentEnvironment.Test, "storage.records.backend")


class TestLoggingDump(object):
    def test_dump_keeps_dictconfig_keys(self) -> None:
        dumped = load(DeploymentEnvironment.Test).logging.model_dump()

        assert dumped["formatters"]["console"]["()"] == "lectern.lib.logging.ExtraFormatter"
        assert dumped["handlers"]["console"]["class"] == "colorlog.StreamHandler"
        assert dumped["handlers"]["console"]["level"] == "WARNING"
