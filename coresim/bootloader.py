"""Loading of program files into memory and disk at start-up."""

from __future__ import annotations

import time
from pathlib import Path
from typing import TextIO

from .entities import Page, Process, ProcessControlBlock, ProcessState, SimulationState
from .grouping import JobGrouping
from .memory import Disk, Ram

GROUPING_THRESHOLD = 0.5


class BootError(Exception):
    """Raised when the program directory cannot be loaded."""


def _now_us() -> int:
    return time.time_ns() // 1000


def _read_program(path: Path) -> list[str]:
    lines = path.read_text().split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class Bootloader:
    """Reads every program of a directory and prepares one process per program."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self.programs: list[list[str]] = []

    def _say(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)

    def boot(
        self, ram: Ram, disk: Disk, directory: str | Path, state: SimulationState
    ) -> list[int]:
        """Load the programs and return the pids in the order they become ready."""
        config = state.config
        count = config.programs_count
        path = Path(directory)

        self._say("========== Bootloader ==========")
        self._validate_directory(path, count)
        self.programs = self._load_programs(path)

        self._say("Processos", "")
        processes: list[Process] = []
        for pid, program in enumerate(self.programs[:count]):
            ram.insert_program(program)
            disk.insert_page(Page(pid=pid, instructions=list(program)))

            pcb = ProcessControlBlock(
                pid=pid,
                priority=1,
                program_address=pid,
                program_size=len(program),
                pc=0,
                state=ProcessState.READY,
            )
            pcb.table_disk[0] = pid
            ram.insert_pcb(pcb)

            processes.append(
                Process(
                    pid=pid,
                    pcb_address=pid,
                    start_time=_now_us(),
                    size=pcb.program_size,
                    remaining_instructions=pcb.program_size,
                    state=ProcessState.READY,
                )
            )
            self._say(f"PID: {pid} carregado.", f"Tamanho: {pcb.program_size}", "")

        state.processes[:] = processes
        self._say("==============================", "")
        return self._process_order(count, config.grouping_enabled)

    def _process_order(self, count: int, grouping_enabled: bool) -> list[int]:
        if not grouping_enabled:
            return list(range(count))
        clusters = JobGrouping(GROUPING_THRESHOLD).cluster_programs(self.programs[:count])
        return [pid for cluster in clusters for pid in cluster]

    @staticmethod
    def _validate_directory(path: Path, count: int) -> None:
        if not path.is_dir():
            raise BootError("O diretório não existe ou não é válido.")
        if sum(1 for _ in path.iterdir()) < count:
            raise BootError("Número de programas inválido!")

    def _load_programs(self, path: Path) -> list[list[str]]:
        self._say("Arquivos e PID", "")
        programs: list[list[str]] = []
        for pid, entry in enumerate(sorted(path.iterdir())):
            if not entry.is_file():
                raise BootError(f"Apenas arquivos regulares são suportados. Arquivo: {entry}")
            self._say(f"Arquivo: {entry}", f"PID: {pid}", "")
            program = _read_program(entry)
            if not program:
                raise BootError(f"Invalid program: {entry}")
            programs.append(program)
        self._say("")
        return programs