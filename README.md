# coresim

A simulator of a small multicore machine and the operating system that runs on it.
Programs are written in a tiny MIPS-like instruction set. Each program file becomes a
process, and the processes are scheduled onto a number of cores, one thread per busy
core. Each core runs instructions through five pipeline stages: fetch, decode,
execute, memory access and write back.

What the simulator models:

- Scheduling policies: FCFS, SJF, SRTN and Round Robin. A process keeps a core until
  it finishes or its quantum runs out; each instruction costs five clock cycles of the
  quantum.
- An optional instruction cache with FIFO or LRU replacement, shared by all cores,
  with hit and miss counters.
- Paging: with no cache, cores read instructions from a single RAM page frame. When a
  process reaches a page that is not in RAM, the operating system swaps it in from the
  disk and counts the swap.
- Optional grouping of similar jobs: programs whose sets of lines have a Jaccard
  similarity above 0.5 are made ready one after another.
- Per-process CPU time and waiting time (in microseconds), per-core logs, and the
  final contents of the data memory.

Only the standard library is needed.

## Installation

```
pip install .
```

## Usage

Put the programs in a directory, one non-empty file per program. Files are taken in
order of their names; the first becomes PID 0, the next PID 1, and so on. The
directory must hold at least as many entries as the number of programs asked for, and
every entry must be a regular file.

Then run:

```
coresim
```

Options:

- `--dataset DIR`: the directory of program files (default `./dataset`).
- `--output DIR`: the directory the logs are written to (default `output`).

The command asks for these settings in turn:

1. The number of programs.
2. The number of cores.
3. The quantum, counted in instructions.
4. The cache size, counted in instructions (at least 1 when a cache is used).
5. The scheduling policy: 1 FCFS, 2 SJF, 3 SRTN, 4 Round Robin.
6. The cache type: 1 none, 2 FIFO, 3 LRU.
7. Whether to group similar jobs: 0 no, anything else yes.

An invalid answer, a bad program directory or an invalid memory access prints a
message and the command exits with status 1.

The results are written to the output directory:

- `process.log` (appended to): CPU time, waiting time and their sum for each process,
  then the swap count.
- `cache.log` (appended to): one `<hits> <misses>` line per process.
- `memory_operations.log`: the 32 data words of RAM at the end.
- `all_cores.log`: events from all cores together.
- `cores/core_<n>.log`: the events of each core.

## Program format

Each line holds one instruction: a mnemonic and up to three integer operands,
separated by spaces. Decoding writes the operands into registers 1, 2 and 3, so those
registers are overwritten by every instruction that has operands. The mnemonics are
`ILOAD`, `ADD`, `SUB`, `MUL`, `STORE`, `BEQ` and `J`; any other word is treated as a
load from data memory. Example:

```
ILOAD 4 5
ILOAD 5 7
ADD 6 4 5
STORE 6 0
```

- `ILOAD r v` puts the value `v` into register `r`.
- `ADD`, `SUB` and `MUL` with `d a b` put into register `d` the result of registers
  `a` and `b`.
- `STORE r addr` writes register `r` to data word `addr` (0 to 31).
- `BEQ a b target` jumps to line `target`, counting lines from 1, when registers `a`
  and `b` are equal.
- `J target` jumps to line `target`, counting lines from 1.

## Library use

The parts can be used on their own, for example:

```python
from coresim.cache import CacheStats, LruCache
from coresim.grouping import JobGrouping, jaccard_similarity

stats = CacheStats()
cache = LruCache(2, stats, delay=0)
cache.add_instruction(0, 0, "ILOAD 4 5")
cache.get_instruction(0, 0)        # "ILOAD 4 5"; stats.hits == 1
cache.get_instruction(0, 1)        # None; stats.misses == 1

JobGrouping(0.5).cluster_programs([["ADD 1 2 3"], ["ADD 1 2 3"], ["J 1"]])
# [[0, 1], [2]]
```

Modules:

- `coresim.alu`: `Alu`, integer arithmetic and comparisons (division truncates toward
  zero).
- `coresim.registers`: `Register` and `RegisterBank`.
- `coresim.cache`: `CacheStats`, `CachePolicy`, `FifoCache`, `LruCache` and the
  `Cache` front end.
- `coresim.memory`: `Ram`, `Disk` and `MemoryAccessError`.
- `coresim.grouping`: `jaccard_similarity` and `JobGrouping`.
- `coresim.policies`: `FcfsPolicy`, `SjfPolicy`, `SrtnPolicy`, `RoundRobinPolicy`,
  `make_policy` and `Scheduler`.
- `coresim.cpu`: `Cpu`, `ControlUnit`, `Pipeline`, `CoreRun`, `split_instruction`
  and `run_core`.
- `coresim.loggers`: `CpuLogger` and `MemoryLogger`.
- `coresim.bootloader`: `Bootloader` and `BootError`.
- `coresim.system`: `OperatingSystem`.
- `coresim.entities`: `Process`, `ProcessControlBlock`, `Page`, `ProcessState`,
  `InstructionType`, `SimulationConfig` and `SimulationState`.
- `coresim.cli`: `read_config`, `make_cache` and `main`.

## What it does not do

Settings are read only interactively from standard input; there is no configuration
file and no command-line option for them. The program format has no mnemonics for
division, set-less-than or branch-if-not-equal, although the control unit can execute
those operations. RAM holds a single page frame.