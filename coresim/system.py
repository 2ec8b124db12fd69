"""The operating system: dispatches processes to cores and handles page faults."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from pathlib import Path

from .cpu import CoreRun, Cpu, run_core
from .entities import PAGE_SIZE, ProcessState, SimulationState
from .loggers import DEFAULT_OUTPUT_DIR, CpuLogger, MemoryLogger
from .memory import Disk, Ram
from .policies import Scheduler, make_policy


class OperatingSystem:
    """Schedules processes on the cores until every process has terminated."""

    def __init__(
        self,
        memory_logger: MemoryLogger,
        ram: Ram,
        disk: Disk,
        cores: Sequence[Cpu],
        state: SimulationState,
        *,
        cpu_logger: CpuLogger | None = None,
        output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    ) -> None:
        self.memory_logger = memory_logger
        self.ram = ram
        self.disk = disk
        self.cores = list(cores)
        self.state = state
        self.output_dir = Path(output_dir)
        config = state.config
        policy = make_policy(config.policy, state.processes)
        self.scheduler = Scheduler(policy, state.processes, config.quantum)
        if cpu_logger is None:
            cpu_logger = CpuLogger(config.cores_count)
            for core in self.cores:
                if core.logger is None:
                    core.logger = cpu_logger
        self.cpu_logger = cpu_logger

    def boot(self, pids: Sequence[int]) -> None:
        """Make the given pids ready and run until all processes finish."""
        for pid in pids:
            self.scheduler.add_ready(pid)
        self.state.init_cores()
        self.run()

    def check_finished(self) -> bool:
        terminated = sum(
            1 for process in self.state.processes if process.state is ProcessState.TERMINATED
        )
        return terminated == self.state.config.programs_count

    def log_processes_state(self) -> None:
        """Append per-process times to ``process.log`` and cache counters to ``cache.log``."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stats = self.state.cache_stats
        data_lines = ["", ""]
        cache_lines = []
        for pid in range(self.state.config.programs_count):
            process = self.state.processes[pid]
            data_lines.extend(
                [
                    f"Processo: {pid}",
                    f"Cpu time: {process.cpu_time}",
                    f"Waiting time: {process.waiting_time}",
                    f"Timestamp: {process.cpu_time + process.waiting_time}",
                    "",
                ]
            )
            cache_lines.append(f"{stats.hits} {stats.misses}")
        data_lines.extend(["", f"Swap count:{self.state.swap_count}"])

        with open(self.output_dir / "process.log", "a") as data_file:
            data_file.write("".join(f"{line}\n" for line in data_lines))
        with open(self.output_dir / "cache.log", "a") as cache_file:
            cache_file.write("".join(f"{line}\n" for line in cache_lines))

    def log_final(self) -> None:
        self.log_processes_state()
        self.memory_logger.write(self.output_dir)
        self.cpu_logger.write(self.output_dir)

    def get_core(self, core_id: int) -> Cpu:
        return self.cores[core_id]

    def run(self) -> None:
        """Dispatch rounds of processes to free cores until all have terminated."""
        state = self.state
        while True:
            if self.check_finished():
                self.log_final()
                return

            errors: list[BaseException] = []
            threads: list[threading.Thread] = []
            runs: list[CoreRun] = []

            for core_id, lock in enumerate(state.core_locks):
                if not lock.acquire(blocking=False):
                    continue
                handed_back = state.ready_process[core_id]
                if handed_back is not None:
                    self.scheduler.add_ready(handed_back)
                    state.ready_process[core_id] = None

                pid = self.scheduler.next_pid()
                if pid is None:
                    lock.release()
                    continue

                run = CoreRun(pid=pid)
                runs.append(run)
                thread = threading.Thread(
                    target=self._run_core, args=(self.get_core(core_id), run, errors)
                )
                threads.append(thread)
                thread.start()

            for thread in threads:
                thread.join()
            if errors:
                raise errors[0]

            for run in runs:
                if run.interrupt:
                    self._handle_page_fault(run)

    def _run_core(self, core: Cpu, run: CoreRun, errors: list[BaseException]) -> None:
        try:
            run_core(core, run, self.state)
        except BaseException as exc:  # re-raised by the dispatching thread
            errors.append(exc)

    def _handle_page_fault(self, run: CoreRun) -> None:
        if self.ram.is_full():
            self.scheduler.add_ready(run.pid)
            return
        self.state.swap_count += 1
        page = self.disk.get_page(run.disk_address)
        frame = self.ram.insert_page(page)
        pcb = self.ram.get_pcb(run.pid)
        pcb.table_ram[pcb.pc // PAGE_SIZE] = frame
        self.ram.update_pcb(run.pid, pcb)
        self.scheduler.add_ready(run.pid)