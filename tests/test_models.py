"""Tests for nixtop data models."""

from pathlib import Path

import pytest

from nixtop.models import UNKNOWN_PATH, ProcessGroup, Settings


def test_process_group_creation():
    """Test ProcessGroup dataclass creation."""
    group = ProcessGroup(account="nixbld1", output_path="/nix/store/abc-hello", pids=(10, 11))

    assert group.account == "nixbld1"
    assert group.output_path == "/nix/store/abc-hello"
    assert group.pids == (10, 11)
    assert group.count == 2


def test_process_group_is_frozen():
    """Test that ProcessGroup is immutable (frozen)."""
    group = ProcessGroup(account="nixbld1", output_path=UNKNOWN_PATH, pids=(1,))

    with pytest.raises(AttributeError):
        group.account = "nixbld2"


def test_process_group_uses_slots():
    """Slots-based dataclasses don't have __dict__."""
    group = ProcessGroup(account="nixbld1", output_path=UNKNOWN_PATH)
    assert not hasattr(group, "__dict__")
    assert group.count == 0


def test_settings_defaults():
    """Test Settings defaults match the usual Nix setup."""
    settings = Settings()

    assert settings.group_name == "nixbld"
    assert settings.tmp_root == Path("/tmp")
    assert settings.env_file_name == "env-vars"
    assert settings.delay == 0.25
    assert settings.backend == "psutil"


def test_unknown_path_is_not_empty():
    """The placeholder must never be mistaken for a missing path."""
    assert UNKNOWN_PATH == "(unknown)"
