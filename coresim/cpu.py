"""Processor core: control unit, five-stage pipeline and the core run loop."""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass

from .alu import Alu
from .cache import Cache
from .entities import (
    PAGE_SIZE,
    REGISTERS_SIZE,
    InstructionType,
    ProcessControlBlock,
    ProcessState,
    SimulationState,
)
from .loggers import CpuLogger
from .memory import Ram
from .registers import RegisterBank

CYCLES_PER_INSTRUCTION = 5

_INSTRUCTIONS = {
    "ILOAD": InstructionType.ILOAD,
    "ADD": InstructionType.ADD,
    "STORE": InstructionType.STORE,
    "BEQ": InstructionType.BEQ,
    "J": InstructionType.J,
    "SUB": InstructionType.SUB,
    "MUL": InstructionType.MUL,
}


def split_instruction(instruction: str) -> list[str]:
    """Split an instruction into words, padding with ``!`` to at least four."""
    words = instruction.split()
    words.extend("!" * (4 - len(words)))
    return words


def _now_us() -> int:
    return time.time_ns() // 1000


class ControlUnit:
    """Drives the execute, memory and write-back stages of a core."""

    def __init__(self, cpu: Cpu) -> None:
        self.cpu = cpu

    def get_instruction(self, program_address: int, pc: int) -> str | None:
        return self.cpu.get_instruction(program_address, pc)

    def increment_pc(self) -> None:
        self.cpu.pc += 1

    def set_register(self, address: int, value: int) -> None:
        self.cpu.set_register(address, value)

    def execute(self, operation: InstructionType) -> None:
        cpu = self.cpu
        if operation in (InstructionType.LOAD, InstructionType.ILOAD, InstructionType.STORE):
            return
        alu = cpu.alu

        if operation in (InstructionType.BNE, InstructionType.BEQ):
            value1 = cpu.get_register(cpu.get_register(2))
            value2 = cpu.get_register(cpu.get_register(1))
            compare = alu.diff if operation is InstructionType.BNE else alu.equal
            if compare(value1, value2):
                cpu.pc = cpu.get_register(3) - 1
            return

        if operation is InstructionType.J:
            cpu.pc = cpu.get_register(1) - 1
            return

        arithmetic = {
            InstructionType.ADD: alu.add,
            InstructionType.SUB: alu.sub,
            InstructionType.MUL: alu.mul,
            InstructionType.DIV: alu.div,
            InstructionType.SLT: alu.slt,
        }.get(operation)
        if arithmetic is None:
            return

        value1 = cpu.get_register(cpu.get_register(2))
        value2 = cpu.get_register(cpu.get_register(3))
        cpu.write_value = arithmetic(value1, value2)
        cpu.write_data = True

    def memory_access(self, operation: InstructionType) -> None:
        cpu = self.cpu
        if operation is InstructionType.LOAD:
            cpu.write_value = cpu.ram.get_value(cpu.get_register(2))
            cpu.write_data = True
        elif operation is InstructionType.ILOAD:
            cpu.write_value = cpu.get_register(2)
            cpu.write_data = True
        elif operation is InstructionType.STORE:
            address = cpu.get_register(2)
            value = cpu.get_register(cpu.get_register(1))
            cpu.ram.set_value(address, value)

    def write_back(self) -> None:
        cpu = self.cpu
        if not cpu.write_data:
            return
        cpu.set_register(cpu.get_register(1), cpu.write_value)
        cpu.write_data = False


class Pipeline:
    """Fetch, decode, execute, memory access and write-back stages."""

    def __init__(self, control_unit: ControlUnit) -> None:
        self.control_unit = control_unit
        self.active_instruction: str | None = None
        self.operation = InstructionType.NOP

    def instruction_fetch(self, pc: int, program_address: int) -> bool:
        """Fetch the instruction at ``pc``; False if it is not available."""
        self.active_instruction = self.control_unit.get_instruction(program_address, pc)
        if not self.active_instruction:
            return False
        self.control_unit.increment_pc()
        return True

    def instruction_decode(self) -> None:
        words = split_instruction(self.active_instruction or "")
        # Unknown mnemonics decode as LOAD.
        self.operation = _INSTRUCTIONS.get(words[0], InstructionType.LOAD)
        for register, word in enumerate(words[1:4], start=1):
            if word != "!":
                self.control_unit.set_register(register, int(word))

    def execute(self) -> None:
        self.control_unit.execute(self.operation)

    def memory_access(self) -> None:
        self.control_unit.memory_access(self.operation)

    def write_back(self) -> None:
        self.control_unit.write_back()


class Cpu:
    """One processor core.

    Without a cache the core reads instructions from the RAM page frames
    (``paged``); with a cache it reads programs through the cache.
    """

    def __init__(
        self,
        core_id: int,
        ram: Ram,
        cache: Cache | None = None,
        *,
        paged: bool | None = None,
        logger: CpuLogger | None = None,
        logs_enabled: bool = True,
    ) -> None:
        self.core_id = core_id
        self.ram = ram
        self.cache = cache
        self.paged = cache is None if paged is None else paged
        self.logger = logger
        self.logs_enabled = logs_enabled
        self.alu = Alu()
        self.register_bank = RegisterBank()
        self.control_unit = ControlUnit(self)
        self.pipeline = Pipeline(self.control_unit)
        self.pc = 0
        self.write_data = False
        self.write_value = 0
        self.actual_pcb: ProcessControlBlock | None = None

    def get_instruction(self, program_address: int, pc: int) -> str | None:
        """Return the instruction, or None if the page holds another process."""
        if not self.paged:
            if self.cache is None:
                return self.ram.get_instruction(program_address, pc)
            cached = self.cache.get_instruction(program_address, pc)
            if cached:
                return cached
            instruction = self.ram.get_instruction(program_address, pc)
            self.cache.add_instruction(program_address, pc, instruction)
            return instruction

        page = self.ram.get_page(program_address)
        if page is None or self.actual_pcb is None or page.pid != self.actual_pcb.pid:
            return None
        return page.instructions[pc % PAGE_SIZE]

    def get_register(self, address: int) -> int:
        return self.register_bank.get_value(address)

    def set_register(self, address: int, value: int) -> None:
        self.register_bank.set_value(address, value)

    def set_registers(self, values) -> None:
        self.register_bank.set_registers(values)

    def log(self, message: str) -> None:
        if self.logs_enabled and self.logger is not None:
            self.logger.log(self.core_id, message)

    def log_all(self, message: str) -> None:
        if self.logs_enabled and self.logger is not None:
            self.logger.log_all(message)


@dataclass
class CoreRun:
    """One dispatch of a process to a core, and how it ended."""

    pid: int
    interrupt: bool = False
    disk_address: int = 0


def _signal_page_fault(run: CoreRun, pcb: ProcessControlBlock) -> None:
    run.interrupt = True
    run.disk_address = pcb.table_disk[0]


def run_core(cpu: Cpu, run: CoreRun, state: SimulationState) -> None:
    """Run a process on a core until it ends, its quantum expires or a page faults.

    Releases the core's lock when done.
    """
    try:
        _run(cpu, run, state)
    finally:
        if cpu.core_id < len(state.core_locks):
            lock = state.core_locks[cpu.core_id]
            if lock.locked():
                lock.release()


def _run(cpu: Cpu, run: CoreRun, state: SimulationState) -> None:
    pid = run.pid
    core = cpu.core_id

    cpu.log(f"Process {pid} started")
    cpu.log_all(f"Process {pid} started at core {core}")

    state.cpu_history[core].append(pid)
    state.process_history[pid].append(core)

    process = dataclasses.replace(state.processes[pid])
    start = _now_us()
    process.waiting_time += start - process.start_time
    quantum = process.quantum

    pcb = cpu.ram.get_pcb(process.pcb_address)
    cpu.actual_pcb = pcb
    cpu.pc = pcb.pc
    cpu.set_registers(pcb.registers)

    pipeline = cpu.pipeline

    while cpu.pc < pcb.program_size:
        page_idx = pcb.pc // PAGE_SIZE
        frame = pcb.table_ram[page_idx]
        if frame == -1:
            _signal_page_fault(run, pcb)
            break

        if not pipeline.instruction_fetch(cpu.pc, frame):
            pcb.table_ram[page_idx] = -1
            _signal_page_fault(run, pcb)
            break

        pipeline.instruction_decode()
        pipeline.execute()
        pipeline.memory_access()
        pipeline.write_back()

        quantum -= CYCLES_PER_INSTRUCTION
        process.remaining_instructions -= 1

        pcb.pc = cpu.pc
        pcb.registers = [cpu.get_register(i) for i in range(REGISTERS_SIZE)]

        if pcb.pc >= pcb.program_size:
            end = _now_us()
            process.cpu_time += end - start
            process.start_time = end
            process.state = ProcessState.TERMINATED
            state.processes[pid] = process
            cpu.ram.update_pcb(process.pcb_address, pcb)

            cpu.log(f"Process {pid} finished")
            cpu.log_all(f"Process {pid} finished at time {end}")

            cpu.ram.release_page()
            break

        if quantum == 0:
            end = _now_us()
            process.cpu_time += end - start
            process.start_time = end
            state.processes[pid] = process
            cpu.ram.update_pcb(process.pcb_address, pcb)

            state.ready_process[core] = pid

            cpu.log(f"Quantum expired for process {pid}")
            cpu.log_all(f"Quantum expired for process {pid}")

            cpu.ram.release_page()
            break