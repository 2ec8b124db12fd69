"""Core data types and shared simulation state."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto

from .cache import CacheStats

REGISTERS_SIZE = 32
PAGE_SIZE = 256
PAGE_TABLE_SIZE = 256


class ProcessState(Enum):
    """Lifecycle states of a process."""

    NEW = auto()
    READY = auto()
    RUNNING = auto()
    BLOCKED = auto()
    TERMINATED = auto()


class InstructionType(Enum):
    """Operations understood by the pipeline."""

    LOAD = auto()
    ILOAD = auto()
    ADD = auto()
    STORE = auto()
    BEQ = auto()
    J = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    SLT = auto()
    BNE = auto()
    NOP = auto()


@dataclass
class Process:
    """Scheduling and accounting data of one process (times in microseconds)."""

    pid: int
    pcb_address: int
    start_time: int = 0
    timestamp: int = 0
    waiting_time: int = 0
    cpu_time: int = 0
    size: int = 0
    quantum: int = 0
    remaining_instructions: int = 0
    state: ProcessState = ProcessState.NEW


@dataclass
class ProcessControlBlock:
    """Execution context of a process as stored in RAM."""

    pid: int
    priority: int = 1
    program_address: int = 0
    program_size: int = 0
    pc: int = 0
    registers: list[int] = field(default_factory=lambda: [0] * REGISTERS_SIZE)
    state: ProcessState = ProcessState.READY
    table_ram: list[int] = field(default_factory=lambda: [-1] * PAGE_TABLE_SIZE)
    table_disk: list[int] = field(default_factory=lambda: [0] * PAGE_TABLE_SIZE)


@dataclass
class Page:
    """A page of program instructions owned by one process."""

    pid: int
    instructions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SimulationConfig:
    """User-chosen simulation parameters.

    ``quantum`` is expressed in clock cycles; each instruction costs five.
    ``policy`` is 1 (FCFS), 2 (SJF), 3 (SRTN) or 4 (Round Robin) and
    ``cache_type`` is 1 (none), 2 (FIFO) or 3 (LRU).
    """

    programs_count: int
    cores_count: int
    quantum: int
    policy: int = 1
    cache_type: int = 1
    cache_size: int = 0
    grouping_enabled: bool = False
    logs_enabled: bool = True


@dataclass
class SimulationState:
    """Mutable state shared by the operating system and the cores."""

    config: SimulationConfig
    processes: list[Process] = field(default_factory=list)
    ready_process: list[int | None] = field(default_factory=list)
    core_locks: list[threading.Lock] = field(default_factory=list)
    cpu_history: list[list[int]] = field(init=False)
    process_history: list[list[int]] = field(init=False)
    swap_count: int = 0
    cache_stats: CacheStats = field(default_factory=CacheStats)

    def __post_init__(self) -> None:
        self.cpu_history = [[] for _ in range(self.config.cores_count)]
        self.process_history = [[] for _ in range(self.config.programs_count)]

    def init_cores(self) -> None:
        """Create one lock and one empty hand-back slot per core."""
        self.core_locks = [threading.Lock() for _ in range(self.config.cores_count)]
        self.ready_process = [None] * self.config.cores_count