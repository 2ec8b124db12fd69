import threading

from coresim.cache import CacheStats
from coresim.entities import (
    PAGE_TABLE_SIZE,
    REGISTERS_SIZE,
    Page,
    Process,
    ProcessControlBlock,
    ProcessState,
    SimulationConfig,
    SimulationState,
)


def _config(programs=3, cores=2):
    return SimulationConfig(programs_count=programs, cores_count=cores, quantum=10)


def test_process_defaults_are_zeroed():
    process = Process(pid=4, pcb_address=4)
    assert (process.cpu_time, process.waiting_time, process.remaining_instructions) == (0, 0, 0)
    assert process.state is ProcessState.NEW


def test_pcb_defaults():
    pcb = ProcessControlBlock(pid=1)
    assert len(pcb.registers) == REGISTERS_SIZE
    assert all(value == -1 for value in pcb.table_ram)
    assert len(pcb.table_disk) == PAGE_TABLE_SIZE
    assert pcb.state is ProcessState.READY
    assert pcb.priority == 1


def test_pcb_lists_are_independent():
    first = ProcessControlBlock(pid=0)
    second = ProcessControlBlock(pid=1)
    first.registers[0] = 99
    assert second.registers[0] == 0


def test_page_holds_instructions():
    page = Page(pid=2, instructions=["ILOAD 1 5"])
    assert page.instructions == ["ILOAD 1 5"]
    assert Page(pid=0).instructions == []


def test_state_histories_sized_from_config():
    state = SimulationState(_config(programs=3, cores=2))
    assert len(state.cpu_history) == 2
    assert len(state.process_history) == 3
    assert state.swap_count == 0
    assert isinstance(state.cache_stats, CacheStats) and state.cache_stats.hits == 0


def test_init_cores_creates_locks_and_empty_slots():
    state = SimulationState(_config(cores=4))
    state.init_cores()
    assert len(state.core_locks) == 4
    assert state.ready_process == [None] * 4
    assert all(isinstance(lock, type(threading.Lock())) for lock in state.core_locks)
    assert state.core_locks[0].acquire(blocking=False) is True
    assert state.core_locks[0].acquire(blocking=False) is False