"""Process sampling engine for nixtop."""

import logging
import subprocess
from collections.abc import Iterable, Iterator
from typing import Callable

import psutil

from nixtop.models import ProcessGroup
from nixtop.resolver import OutputPathResolver, UidLookup, lookup_uid

logger = logging.getLogger(__name__)

ProcessLister = Callable[[set[str]], Iterable[tuple[str, int]]]
ProcessTable = Callable[[str], list[str]]

DETAIL_COLUMNS = "uid,pid,ppid,stime,time,command"


def psutil_processes(accounts: set[str]) -> Iterator[tuple[str, int]]:
    """
    Yield ``(user, pid)`` for every process owned by one of ``accounts``.

    Processes whose owner cannot be read have no username and are skipped.
    """
    for proc in psutil.process_iter(attrs=["pid", "username"]):
        info = proc.info
        username = info.get("username")
        if username in accounts:
            yield username, info["pid"]


def ps_processes(accounts: set[str], uid_lookup: UidLookup = lookup_uid) -> list[tuple[str, int]]:
    """
    List ``(user, pid)`` pairs by asking ``ps``.

    ps cuts long user names short, so owners are requested as uids and mapped
    back to the account names. Accounts without a passwd entry are skipped.
    """
    users_by_uid: dict[int, str] = {}
    for account in sorted(accounts):
        try:
            users_by_uid[uid_lookup(account)] = account
        except KeyError:
            logger.debug("no passwd entry for %s", account)
    if not users_by_uid:
        return []

    result = subprocess.run(
        ["ps", "-o", "uid=,pid=", "-u", ",".join(str(uid) for uid in users_by_uid)],
        capture_output=True,
        text=True,
        check=False,
    )
    pairs: list[tuple[str, int]] = []
    for line in result.stdout.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            uid, pid = int(parts[0]), int(parts[1])
        except ValueError:
            continue
        if uid in users_by_uid:
            pairs.append((users_by_uid[uid], pid))
    return pairs


LISTERS: dict[str, ProcessLister] = {
    "psutil": psutil_processes,
    "ps": ps_processes,
}


def ps_table(account: str) -> list[str]:
    """Return the ``ps`` listing of the account's processes, or nothing if ps fails."""
    try:
        result = subprocess.run(
            ["ps", "-o", DETAIL_COLUMNS, "-U", account],
            capture_output=True,
            text=True,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("ps failed for %s: %s", account, exc)
        return []
    return result.stdout.splitlines()


class ProcessSampler:
    """Groups the processes of build accounts and resolves what each is building."""

    def __init__(self, resolver: OutputPathResolver, lister: ProcessLister = psutil_processes) -> None:
        """
        Initialize the ProcessSampler.

        Args:
            resolver: Resolves the output path of an account from one of its pids.
            lister: Returns ``(user, pid)`` pairs for the given accounts.
        """
        self._resolver = resolver
        self._lister = lister

    def sample(self, accounts: set[str]) -> dict[str, ProcessGroup]:
        """
        Take one sample of the process table.

        Returns a mapping of account to its ProcessGroup. Accounts without
        processes are left out, and a failing process query yields an empty
        mapping for this cycle.
        """
        if not accounts:
            return {}

        pids_by_user: dict[str, list[int]] = {}
        try:
            for user, pid in self._lister(accounts):
                if user in accounts:
                    pids_by_user.setdefault(user, []).append(pid)
        except (OSError, subprocess.SubprocessError, psutil.Error) as exc:
            logger.debug("process query failed: %s", exc)
            return {}

        groups: dict[str, ProcessGroup] = {}
        for user, pids in pids_by_user.items():
            if not pids:
                continue
            path = self._resolver.resolve(user, pids[0])
            assert path, f"empty output path for {user}"
            groups[user] = ProcessGroup(account=user, output_path=path, pids=tuple(pids))
        return groups
