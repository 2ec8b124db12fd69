import pytest

from coresim.cache import Cache, CacheStats, FifoCache
from coresim.cpu import CoreRun, Cpu, InstructionType, Pipeline, run_core, split_instruction
from coresim.entities import (
    Page,
    Process,
    ProcessControlBlock,
    ProcessState,
    SimulationConfig,
    SimulationState,
)
from coresim.loggers import CpuLogger
from coresim.memory import Disk, Ram


def make_system(program, quantum=100):
    config = SimulationConfig(programs_count=1, cores_count=1, quantum=quantum)
    state = SimulationState(config)
    state.init_cores()
    ram = Ram(delay=0)
    disk = Disk()
    ram.insert_program(program)
    page = Page(pid=0, instructions=list(program))
    disk.insert_page(page)
    pcb = ProcessControlBlock(pid=0, program_address=0, program_size=len(program))
    pcb.table_disk[0] = 0
    pcb.table_ram[0] = ram.insert_page(page)
    ram.insert_pcb(pcb)
    state.processes.append(
        Process(
            pid=0,
            pcb_address=0,
            size=len(program),
            remaining_instructions=len(program),
            quantum=quantum,
            state=ProcessState.READY,
        )
    )
    logger = CpuLogger(1)
    cpu = Cpu(0, ram, logger=logger)
    return state, ram, cpu, logger


def test_split_instruction_pads():
    assert split_instruction("ADD 1 2") == ["ADD", "1", "2", "!"]
    assert split_instruction("") == ["!", "!", "!", "!"]
    assert split_instruction("  J   7 ") == ["J", "7", "!", "!"]


def test_split_instruction_keeps_extra_words():
    assert split_instruction("A B C D E") == ["A", "B", "C", "D", "E"]


def test_control_unit_add_writes_back():
    cpu = Cpu(0, Ram(delay=0))
    cpu.set_register(4, 7)
    cpu.set_register(5, 3)
    cpu.set_register(1, 6)
    cpu.set_register(2, 4)
    cpu.set_register(3, 5)
    cpu.control_unit.execute(InstructionType.ADD)
    assert cpu.write_data is True
    cpu.control_unit.write_back()
    assert cpu.get_register(6) == 7 + 3
    assert cpu.write_data is False


def test_control_unit_jump_sets_pc():
    cpu = Cpu(0, Ram(delay=0))
    cpu.set_register(1, 5)
    cpu.control_unit.execute(InstructionType.J)
    assert cpu.pc == 5 - 1


def test_control_unit_beq_only_when_equal():
    cpu = Cpu(0, Ram(delay=0))
    cpu.pc = 9
    cpu.set_registers([0] * 32)
    cpu.set_register(4, 1)
    cpu.set_register(5, 2)
    cpu.set_register(1, 4)
    cpu.set_register(2, 5)
    cpu.set_register(3, 3)
    cpu.control_unit.execute(InstructionType.BEQ)
    assert cpu.pc == 9
    cpu.control_unit.execute(InstructionType.BNE)
    assert cpu.pc == 3 - 1


def test_control_unit_store_and_load():
    ram = Ram(delay=0)
    cpu = Cpu(0, ram)
    cpu.set_register(4, 42)
    cpu.set_register(1, 4)
    cpu.set_register(2, 6)
    cpu.control_unit.memory_access(InstructionType.STORE)
    assert ram.get_value(6) == 42
    cpu.set_register(1, 8)
    cpu.control_unit.memory_access(InstructionType.LOAD)
    cpu.control_unit.write_back()
    assert cpu.get_register(8) == 42


def test_write_back_without_data_changes_nothing():
    cpu = Cpu(0, Ram(delay=0))
    cpu.set_register(1, 4)
    cpu.write_value = 99
    cpu.control_unit.write_back()
    assert cpu.get_register(4) == 0


def test_division_by_zero_raises():
    cpu = Cpu(0, Ram(delay=0))
    cpu.set_register(1, 6)
    cpu.set_register(2, 4)
    cpu.set_register(3, 5)
    cpu.set_register(4, 8)
    with pytest.raises(ZeroDivisionError):
        cpu.control_unit.execute(InstructionType.DIV)


def test_pipeline_decode_unknown_mnemonic_is_load():
    cpu = Cpu(0, Ram(delay=0))
    pipeline = Pipeline(cpu.control_unit)
    pipeline.active_instruction = "LOAD 7 0"
    pipeline.instruction_decode()
    assert pipeline.operation is InstructionType.LOAD
    assert cpu.get_register(1) == 7
    assert cpu.get_register(2) == 0


def test_pipeline_fetch_fails_on_foreign_page():
    ram = Ram(delay=0)
    ram.insert_page(Page(pid=3, instructions=["ILOAD 4 1"]))
    cpu = Cpu(0, ram)
    cpu.actual_pcb = ProcessControlBlock(pid=0)
    assert cpu.pipeline.instruction_fetch(0, 0) is False
    assert cpu.pc == 0
    cpu.actual_pcb = ProcessControlBlock(pid=3)
    assert cpu.pipeline.instruction_fetch(0, 0) is True
    assert cpu.pc == 1
    assert cpu.pipeline.active_instruction == "ILOAD 4 1"


def test_cached_cpu_hits_after_miss():
    ram = Ram(delay=0)
    ram.insert_program(["ILOAD 4 1", "ILOAD 5 2"])
    stats = CacheStats()
    cpu = Cpu(0, ram, Cache(FifoCache(4, stats, delay=0)))
    assert cpu.get_instruction(0, 1) == "ILOAD 5 2"
    assert (stats.hits, stats.misses) == (0, 1)
    assert cpu.get_instruction(0, 1) == "ILOAD 5 2"
    assert (stats.hits, stats.misses) == (1, 1)


def test_logs_disabled_records_nothing():
    logger = CpuLogger(1)
    cpu = Cpu(0, Ram(delay=0), logger=logger, logs_enabled=False)
    cpu.log("x")
    cpu.log_all("y")
    assert logger.core_logs == [[]]
    assert logger.all_cores_logs == []


def test_run_core_completes_program():
    program = ["ILOAD 4 42", "STORE 4 0", "LOAD 7 0"]
    state, ram, cpu, logger = make_system(program)
    state.core_locks[0].acquire()
    run = CoreRun(pid=0)
    run_core(cpu, run, state)

    assert not state.core_locks[0].locked()
    assert run.interrupt is False
    process = state.processes[0]
    assert process.state is ProcessState.TERMINATED
    assert process.remaining_instructions == 0
    assert process.waiting_time > 0
    assert ram.get_value(0) == 42
    pcb = ram.get_pcb(0)
    assert pcb.pc == len(program)
    assert pcb.registers[7] == 42
    assert ram.is_full() is False
    assert logger.core_logs[0] == ["Process 0 started", "Process 0 finished"]
    assert logger.all_cores_logs[0] == "Process 0 started at core 0"
    assert state.cpu_history == [[0]]
    assert state.process_history == [[0]]


def test_run_core_quantum_expires():
    program = ["ILOAD 4 1", "ILOAD 5 2", "ILOAD 6 3", "ILOAD 8 4"]
    state, ram, cpu, logger = make_system(program, quantum=10)
    run = CoreRun(pid=0)
    run_core(cpu, run, state)

    assert state.ready_process[0] == 0
    pcb = ram.get_pcb(0)
    assert pcb.pc == 2
    assert pcb.registers[5] == 2
    assert state.processes[0].state is ProcessState.READY
    assert state.processes[0].remaining_instructions == len(program) - pcb.pc
    assert "Quantum expired for process 0" in logger.core_logs[0]


def test_run_core_resumes_from_pcb():
    program = ["ILOAD 4 1", "ILOAD 5 2", "ILOAD 6 3"]
    state, ram, cpu, _ = make_system(program, quantum=5)
    run_core(cpu, CoreRun(pid=0), state)
    first_pc = ram.get_pcb(0).pc
    ram.insert_page(Page(pid=0, instructions=list(program)))
    run_core(cpu, CoreRun(pid=0), state)
    assert ram.get_pcb(0).pc == first_pc + 1
    assert state.cpu_history[0] == [0, 0]


def test_run_core_page_fault_when_not_loaded():
    program = ["ILOAD 4 1"]
    state, ram, cpu, _ = make_system(program)
    pcb = ram.get_pcb(0)
    pcb.table_ram[0] = -1
    pcb.table_disk[0] = 0
    ram.update_pcb(0, pcb)
    run = CoreRun(pid=0)
    run_core(cpu, run, state)
    assert run.interrupt is True
    assert run.disk_address == pcb.table_disk[0]
    assert state.processes[0].state is ProcessState.READY
    assert ram.get_pcb(0).pc == 0


def test_run_core_page_fault_on_foreign_page():
    program = ["ILOAD 4 1"]
    state, ram, cpu, _ = make_system(program)
    ram.insert_page(Page(pid=5, instructions=["ILOAD 4 9"]))
    run = CoreRun(pid=0)
    run_core(cpu, run, state)
    assert run.interrupt is True
    assert cpu.get_register(4) == 0