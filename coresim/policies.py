"""Scheduling policies and the scheduler that uses them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Sequence

from .entities import Process, ProcessState

_NO_LIMIT = 10**9


class Policy(ABC):
    """Chooses which ready process runs next."""

    def __init__(self, processes: Sequence[Process]) -> None:
        self.processes = processes

    @abstractmethod
    def next_pid(self) -> int | None:
        """Take the next pid to run, or None if there is none."""

    @abstractmethod
    def add_ready(self, pid: int) -> None:
        """Put a pid in the ready set."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of pids in the ready set."""


class FcfsPolicy(Policy):
    """First come, first served."""

    def __init__(self, processes: Sequence[Process]) -> None:
        super().__init__(processes)
        self._ready: deque[int] = deque()

    def next_pid(self) -> int | None:
        return self._ready.popleft() if self._ready else None

    def add_ready(self, pid: int) -> None:
        self._ready.append(pid)

    def __len__(self) -> int:
        return len(self._ready)


class _ListPolicy(Policy):
    def __init__(self, processes: Sequence[Process]) -> None:
        super().__init__(processes)
        self._ready: list[int] = []

    def __len__(self) -> int:
        return len(self._ready)

    def _take(self, pid: int | None) -> int | None:
        if pid is not None:
            self._ready = [p for p in self._ready if p != pid]
        return pid


class SjfPolicy(_ListPolicy):
    """Shortest job first, by program size."""

    def next_pid(self) -> int | None:
        best, chosen = _NO_LIMIT, None
        for pid in self._ready:
            process = self.processes[pid]
            if process.size < best:
                best, chosen = process.size, process.pid
        return self._take(chosen)

    def add_ready(self, pid: int) -> None:
        self._ready.append(pid)


class SrtnPolicy(_ListPolicy):
    """Shortest remaining time next.

    A candidate is compared by remaining instructions, but the bar it sets
    for later candidates is its total size.
    """

    def next_pid(self) -> int | None:
        best, chosen = _NO_LIMIT, None
        for pid in self._ready:
            process = self.processes[pid]
            if process.remaining_instructions < best:
                best, chosen = process.size, process.pid
        return self._take(chosen)

    def add_ready(self, pid: int) -> None:
        self._ready.append(pid)


class RoundRobinPolicy(Policy):
    """Cycles through every pid ever made ready, skipping non-ready ones."""

    def __init__(self, processes: Sequence[Process]) -> None:
        super().__init__(processes)
        self._ready: list[int] = []
        self._current = 0

    def next_pid(self) -> int | None:
        if not self._ready:
            return None
        size = len(self._ready)
        pid = self._ready[self._current]
        self._current = (self._current + 1) % size
        checked = 0
        while self.processes[pid].state is not ProcessState.READY:
            pid = self._ready[self._current]
            checked += 1
            if checked == size:
                return None
            self._current = (self._current + 1) % size
        return pid

    def add_ready(self, pid: int) -> None:
        self._ready.append(pid)

    def __len__(self) -> int:
        return len(self._ready)


_POLICIES: dict[int, type[Policy]] = {
    1: FcfsPolicy,
    2: SjfPolicy,
    3: SrtnPolicy,
    4: RoundRobinPolicy,
}


def make_policy(kind: int, processes: Sequence[Process]) -> Policy:
    """Build policy 1 (FCFS), 2 (SJF), 3 (SRTN) or 4 (Round Robin)."""
    try:
        policy_class = _POLICIES[kind]
    except KeyError:
        raise ValueError(f"unknown scheduling policy {kind}") from None
    return policy_class(processes)


class Scheduler:
    """Hands out pids from a policy and resets their quantum."""

    def __init__(self, policy: Policy, processes: Sequence[Process], quantum: int) -> None:
        self.policy = policy
        self.processes = processes
        self.quantum = quantum

    def next_pid(self) -> int | None:
        pid = self.policy.next_pid()
        if pid is not None:
            self.processes[pid].quantum = self.quantum
        return pid

    def add_ready(self, pid: int) -> None:
        self.policy.add_ready(pid)

    def __len__(self) -> int:
        return len(self.policy)