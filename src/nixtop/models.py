"""Data models for nixtop."""

from dataclasses import dataclass, field
from pathlib import Path

UNKNOWN_PATH = "(unknown)"

BACKENDS = ("psutil", "ps")


@dataclass(slots=True, frozen=True)
class ProcessGroup:
    """Processes owned by one build account during a single sampling cycle."""

    account: str
    output_path: str
    pids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        """Number of processes in the group."""
        return len(self.pids)


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime settings, filled from the command line."""

    group_name: str = "nixbld"
    tmp_root: Path = Path("/tmp")
    env_file_name: str = "env-vars"
    delay: float = 0.25
    backend: str = "psutil"  # one of BACKENDS
