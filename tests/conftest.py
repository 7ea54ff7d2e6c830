"""Shared fixtures for the confstore test suite."""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Any

import pytest

from confstore import ConfigFormat, ConfigStore

SUBTEST_SECRET = base64.b64encode(b"subtest_secret").decode("ascii")

SAMPLE_YAML = f"""
root:
  family1:
    key1: test11
    key2:
      subkey1: test121
      subkey2: 122
  family2: test2
  family3:
    key1: true
    key2: false
subroot:
  family1:
    key1: 211
    key2: 212.212
    key3:
      secret: {SUBTEST_SECRET}
subroot.family1.key2.subkey1: 2121.2121
simpleprop: 3
another.simple.prop: 4
"""


# === Fixtures ===


@pytest.fixture
def env() -> dict[str, str]:
    """Mutable fake environment injected into stores built by the fixtures below."""
    return {}


@pytest.fixture
def sample_yaml_path(tmp_path: Path) -> Path:
    """Write the sample YAML document and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE_YAML)
    return path


@pytest.fixture
def store(sample_yaml_path: Path, env: dict[str, str]) -> ConfigStore:
    """Store loaded from the sample YAML file, reading the fake environment."""
    return ConfigStore.from_file(sample_yaml_path, ConfigFormat.YAML, env_lookup=env.get)


@pytest.fixture
def make_store(env: dict[str, str]) -> Any:
    """Factory building a store from a plain mapping over the fake environment."""

    def factory(data: dict[str, Any]) -> ConfigStore:
        return ConfigStore(data, env_lookup=env.get)

    return factory
