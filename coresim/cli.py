"""Interactive command line entry point."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from .bootloader import Bootloader, BootError
from .cache import Cache, CacheStats, FifoCache, LruCache
from .cpu import CYCLES_PER_INSTRUCTION, Cpu
from .entities import SimulationConfig, SimulationState
from .loggers import DEFAULT_OUTPUT_DIR, CpuLogger, MemoryLogger
from .memory import Disk, MemoryAccessError, Ram
from .system import OperatingSystem


def _ask_int(ask: Callable[[str], str], prompt: str) -> int:
    answer = ask(prompt).strip()
    try:
        return int(answer)
    except ValueError:
        raise ValueError(f"Número inválido: {answer!r}") from None


def read_config(ask: Callable[[str], str]) -> SimulationConfig:
    """Ask for the simulation parameters; ``ask`` takes a prompt and returns the answer."""
    print("========== Menu ==========")
    programs_count = _ask_int(ask, "Digite o número de programas: ")
    cores_count = _ask_int(ask, "Digite o número de núcleos: ")
    quantum = _ask_int(ask, "Digite o quantum (em número de instruções): ")
    cache_size = _ask_int(ask, "Digite o tamanho da cache (em número de instruções): ")
    quantum *= CYCLES_PER_INSTRUCTION

    print()
    print("[1] FCFS (First Come First Service)")
    print("[2] SJF (Shortest Job First)")
    print("[3] SRTN (Shortest Remaining Time Next)")
    print("[4] Round Robin")
    print()
    policy = _ask_int(ask, "Escolha uma política de escalonamento: ")
    if not 1 <= policy <= 4:
        raise ValueError("Política inválida. Encerrando o programa.")

    print()
    print("[1] Nenhum")
    print("[2] FIFO")
    print("[3] LRU")
    print()
    cache_type = _ask_int(ask, "Escolha o tipo da cache: ")
    if not 1 <= cache_type <= 3:
        raise ValueError("Tipo inválido. Encerrando o programa.")

    print()
    grouping = _ask_int(ask, "Agrupar jobs semelhantes? ([0] Não [1] Sim ): ") != 0
    print()
    print("==========================")
    print()

    return SimulationConfig(
        programs_count=programs_count,
        cores_count=cores_count,
        quantum=quantum,
        policy=policy,
        cache_type=cache_type,
        cache_size=cache_size,
        grouping_enabled=grouping,
    )


def make_cache(config: SimulationConfig, stats: CacheStats) -> Cache | None:
    """Build the instruction cache chosen in the configuration, if any."""
    if config.cache_type == 2:
        return Cache(FifoCache(config.cache_size, stats))
    if config.cache_type == 3:
        return Cache(LruCache(config.cache_size, stats))
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="coresim", description="Multicore CPU simulator.")
    parser.add_argument("--dataset", default="./dataset", help="directory of program files")
    parser.add_argument("--output", default=str(DEFAULT_OUTPUT_DIR), help="log directory")
    args = parser.parse_args(argv)

    try:
        config = read_config(input)
        state = SimulationState(config)
        ram = Ram()
        disk = Disk()
        cache = make_cache(config, state.cache_stats)
        cpu_logger = CpuLogger(config.cores_count)
        cores = [
            Cpu(core_id, ram, cache, logger=cpu_logger, logs_enabled=config.logs_enabled)
            for core_id in range(config.cores_count)
        ]
        memory_logger = MemoryLogger(ram)
        pids = Bootloader().boot(ram, disk, args.dataset, state)
        system = OperatingSystem(
            memory_logger, ram, disk, cores, state,
            cpu_logger=cpu_logger, output_dir=args.output,
        )
        system.boot(pids)
    except EOFError:
        print("Entrada encerrada.", file=sys.stderr)
        return 1
    except (ValueError, BootError, MemoryAccessError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())