"""Instruction caches with FIFO and LRU replacement."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from dataclasses import dataclass, field

Key = tuple[int, int]


@dataclass
class CacheStats:
    """Hit and miss counters shared by the caches."""

    hits: int = 0
    misses: int = 0


class CachePolicy(ABC):
    """Base of the replacement strategies; thread safe."""

    def __init__(self, size: int, stats: CacheStats | None = None, delay: float = 0.0001) -> None:
        if size < 1:
            raise ValueError("cache size must be at least 1")
        self.size = size
        self.stats = stats if stats is not None else CacheStats()
        self.delay = delay
        self._lock = threading.Lock()

    def _pause(self) -> None:
        if self.delay > 0:
            time.sleep(self.delay)

    @abstractmethod
    def get_instruction(self, program_address: int, pc: int) -> str | None:
        """Return the cached instruction, or None on a miss."""

    @abstractmethod
    def add_instruction(self, program_address: int, pc: int, instruction: str) -> None:
        """Store an instruction, evicting one entry if the cache is full."""


class FifoCache(CachePolicy):
    """Evicts entries in insertion order."""

    def __init__(self, size: int, stats: CacheStats | None = None, delay: float = 0.0001) -> None:
        super().__init__(size, stats, delay)
        self._entries: dict[Key, str] = {}
        self._order: deque[Key] = deque()

    def get_instruction(self, program_address: int, pc: int) -> str | None:
        with self._lock:
            self._pause()
            instruction = self._entries.get((program_address, pc))
            if instruction is None:
                self.stats.misses += 1
            else:
                self.stats.hits += 1
            return instruction

    def add_instruction(self, program_address: int, pc: int, instruction: str) -> None:
        with self._lock:
            if len(self._entries) == self.size:
                oldest = self._order.popleft()
                self._entries.pop(oldest, None)
            key = (program_address, pc)
            self._entries[key] = instruction
            self._order.append(key)


class LruCache(CachePolicy):
    """Evicts the least recently used entry."""

    def __init__(self, size: int, stats: CacheStats | None = None, delay: float = 0.0001) -> None:
        super().__init__(size, stats, delay)
        self._entries: OrderedDict[Key, str] = OrderedDict()

    def get_instruction(self, program_address: int, pc: int) -> str | None:
        with self._lock:
            self._pause()
            key = (program_address, pc)
            if key not in self._entries:
                self.stats.misses += 1
                return None
            self._entries.move_to_end(key)
            self.stats.hits += 1
            return self._entries[key]

    def add_instruction(self, program_address: int, pc: int, instruction: str) -> None:
        with self._lock:
            key = (program_address, pc)
            if key in self._entries:
                self._entries[key] = instruction
                self._entries.move_to_end(key)
                return
            if len(self._entries) == self.size:
                self._entries.popitem(last=False)
            self._entries[key] = instruction


@dataclass
class Cache:
    """Front end that delegates to a replacement strategy."""

    policy: CachePolicy = field()

    def get_instruction(self, program_address: int, pc: int) -> str | None:
        return self.policy.get_instruction(program_address, pc)

    def add_instruction(self, program_address: int, pc: int, instruction: str) -> None:
        self.policy.add_instruction(program_address, pc, instruction)