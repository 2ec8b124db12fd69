"""General-purpose register bank."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .entities import REGISTERS_SIZE


@dataclass
class Register:
    value: int = 0
    dirty: bool = False


class RegisterBank:
    """A fixed-size bank of integer registers."""

    def __init__(self, size: int = REGISTERS_SIZE) -> None:
        self.registers = [Register() for _ in range(size)]

    def __len__(self) -> int:
        return len(self.registers)

    def get_value(self, address: int) -> int:
        return self.registers[address].value

    def set_value(self, address: int, value: int) -> None:
        self.registers[address].value = value

    def set_dirty(self, address: int) -> None:
        self.registers[address].dirty = True

    def set_clean(self, address: int) -> None:
        self.registers[address].dirty = False

    def set_registers(self, values: Iterable[int]) -> None:
        """Load register values in order, starting at register 0."""
        for register, value in zip(self.registers, values):
            register.value = value

    def dump(self) -> str:
        """Return one ``0x<index> <value>`` line per register."""
        return "".join(
            f"0x{index} {register.value}\n" for index, register in enumerate(self.registers)
        )