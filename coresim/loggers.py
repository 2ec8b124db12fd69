"""Per-core execution logs and the final memory dump."""

from __future__ import annotations

import threading
from pathlib import Path

from .memory import FREE_SPACE_SIZE, Ram

DEFAULT_OUTPUT_DIR = Path("output")


class CpuLogger:
    """Collects messages per core and for all cores together."""

    def __init__(self, cores_count: int) -> None:
        self.core_logs: list[list[str]] = [[] for _ in range(cores_count)]
        self.all_cores_logs: list[str] = []
        self._lock = threading.Lock()

    def log(self, core_id: int, message: str) -> None:
        """Record a message in the log of one core."""
        self.core_logs[core_id].append(message)

    def log_all(self, message: str) -> None:
        """Record a message in the log shared by every core."""
        with self._lock:
            self.all_cores_logs.append(message)

    def write(self, output_dir: str | Path = DEFAULT_OUTPUT_DIR) -> None:
        """Write ``cores/core_<i>.log`` for each core and ``all_cores.log``."""
        output = Path(output_dir)
        cores_dir = output / "cores"
        cores_dir.mkdir(parents=True, exist_ok=True)
        for core_id, messages in enumerate(self.core_logs):
            (cores_dir / f"core_{core_id}.log").write_text(
                "".join(f"{message}\n" for message in messages)
            )
        with self._lock:
            shared = list(self.all_cores_logs)
        (output / "all_cores.log").write_text("".join(f"{message}\n" for message in shared))


class MemoryLogger:
    """Dumps the data region of RAM to a file."""

    def __init__(self, ram: Ram) -> None:
        self.ram = ram

    def write(self, output_dir: str | Path = DEFAULT_OUTPUT_DIR) -> None:
        """Write ``memory_operations.log`` with every data address and value."""
        output = Path(output_dir)
        output.mkdir(parents=True, exist_ok=True)
        lines = ["", "=== Final Memory State ===", "RAM Contents:"]
        lines.extend(
            f"Address {address:2}: {self.ram.get_value(address):5}"
            for address in range(FREE_SPACE_SIZE)
        )
        lines.extend(["", "=== End of Memory State ==="])
        (output / "memory_operations.log").write_text("".join(f"{line}\n" for line in lines))