"""Output path resolution for running builds.

Nothing in the process table says which derivation a build user is working
on, so the output path is recovered from whatever the build leaves behind:

1. the ``out`` variable in the live process environment,
2. the ``declare -x out="..."`` line of the ``env-vars`` file that Nix writes
   into the build directory (the newest entry under the temp root owned by
   the build user),
3. the build directory itself.

Every step is best-effort. A step that fails or finds nothing hands over to
the next one, and ``UNKNOWN_PATH`` is returned when all of them come up empty.
"""

import logging
import os
import pwd
from collections.abc import Mapping
from functools import cache
from pathlib import Path
from typing import Callable

import psutil

from nixtop.models import UNKNOWN_PATH

logger = logging.getLogger(__name__)

OUT_VARIABLE = "out"
OUT_DECLARATION = "declare -x out="

EnvironReader = Callable[[int], Mapping[str, str]]
UidLookup = Callable[[str], int]


def read_process_environ(pid: int) -> Mapping[str, str]:
    """Read the environment of a running process."""
    return psutil.Process(pid).environ()


def lookup_uid(account: str) -> int:
    """Map a user name to its uid."""
    return pwd.getpwnam(account).pw_uid


class OutputPathResolver:
    """Work out which output path a build account is currently producing."""

    def __init__(
        self,
        tmp_root: Path = Path("/tmp"),
        env_file_name: str = "env-vars",
        environ_reader: EnvironReader = read_process_environ,
        uid_lookup: UidLookup = lookup_uid,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            tmp_root: Directory Nix creates build directories in.
            env_file_name: Name of the environment dump inside a build directory.
            environ_reader: Returns the environment of a pid.
            uid_lookup: Returns the uid of a user name, raising KeyError if unknown.
        """
        self._tmp_root = Path(tmp_root)
        self._env_file_name = env_file_name
        self._environ_reader = environ_reader
        self._uid_lookup = uid_lookup

    def resolve(self, account: str, pid: int) -> str:
        """Return the output path for ``account``, using ``pid`` as its representative process."""
        build_dir = cache(lambda: self.newest_build_dir(account))
        steps = (
            lambda: self.out_from_environ(pid),
            lambda: self.out_from_env_file(build_dir()),
            build_dir,
        )
        for step in steps:
            value = step()
            if value:
                return value
        return UNKNOWN_PATH

    def out_from_environ(self, pid: int) -> str | None:
        """Return ``$out`` of the process, if it can be read and is set."""
        try:
            environ = self._environ_reader(pid)
        except (psutil.Error, OSError) as exc:
            logger.debug("cannot read environment of pid %d: %s", pid, exc)
            return None
        return environ.get(OUT_VARIABLE) or None

    def newest_build_dir(self, account: str) -> str | None:
        """
        Return the entry directly under the temp root most recently changed by ``account``.

        Ownership and ctime are taken from the symlink target, if any.
        """
        try:
            uid = self._uid_lookup(account)
        except KeyError:
            logger.debug("no passwd entry for %s", account)
            return None

        newest: tuple[float, str] | None = None
        try:
            with os.scandir(self._tmp_root) as entries:
                for entry in entries:
                    try:
                        st = entry.stat(follow_symlinks=True)
                    except OSError:
                        continue  # vanished or dangling
                    if st.st_uid != uid:
                        continue
                    if newest is None or st.st_ctime >= newest[0]:
                        newest = (st.st_ctime, entry.path)
        except OSError as exc:
            logger.debug("cannot scan %s: %s", self._tmp_root, exc)
            return None

        return newest[1] if newest else None

    def out_from_env_file(self, build_dir: str | None) -> str | None:
        """Return the ``out`` declared in the build directory's environment dump."""
        if not build_dir:
            return None
        env_file = Path(build_dir) / self._env_file_name
        try:
            text = env_file.read_text(errors="replace")
        except OSError as exc:
            logger.debug("cannot read %s: %s", env_file, exc)
            return None

        for line in text.splitlines():
            if line.startswith(OUT_DECLARATION):
                parts = line.split('"')
                return parts[1] if len(parts) > 1 else None
        return None
