"""Verification Test: sampling while build processes come and go.

Dummy workers owned by the current user stand in for build processes and are
killed at random while the sampler runs. Sampling must never crash on
processes that vanish between listing and resolution.
"""

import multiprocessing
import os
import pwd
import random
import time

import pytest

from nixtop.frame import build_frame
from nixtop.monitor import ProcessSampler, psutil_processes
from nixtop.resolver import OutputPathResolver


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


@pytest.fixture
def workers():
    processes = [multiprocessing.Process(target=dummy_worker, args=(60.0,)) for _ in range(20)]
    for p in processes:
        p.start()
    yield processes
    for p in processes:
        if p.is_alive():
            p.terminate()
        p.join(timeout=5.0)


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_sampler_survives_process_termination(self, workers, tmp_path):
        """Test sampling keeps working while workers are killed between samples."""
        account = pwd.getpwuid(os.getuid()).pw_name
        resolver = OutputPathResolver(tmp_root=tmp_path)
        sampler = ProcessSampler(resolver, psutil_processes)

        groups = sampler.sample({account})
        assert account in groups
        assert all(p.pid in groups[account].pids for p in workers)

        for victim in random.sample(workers, 10):
            victim.terminate()
            groups = sampler.sample({account})
            lines = build_frame(groups, lambda name: [])
            assert lines[0].startswith("Nix build summary (")

        for p in workers:
            p.join(timeout=5.0)

        groups = sampler.sample({account})
        dead = {p.pid for p in workers if not p.is_alive()}
        assert dead
        assert not dead & set(groups[account].pids)
