"""Main memory and disk."""

from __future__ import annotations

import copy
import time
from collections.abc import Sequence

from .entities import Page, ProcessControlBlock

MAX_PAGES = 1
FREE_SPACE_SIZE = 32


class MemoryAccessError(IndexError):
    """Raised on an access outside a memory region."""


class Ram:
    """RAM split into program, PCB, data and page regions."""

    def __init__(self, max_pages: int = MAX_PAGES, delay: float = 0.001) -> None:
        self.programs: list[list[str]] = []
        self.pcbs: list[ProcessControlBlock] = []
        self.free_space = [0] * FREE_SPACE_SIZE
        self.max_pages = max_pages
        self.pages: list[Page | None] = [None] * max_pages
        self.items = 0
        self._next_page = 0
        self.delay = delay

    def insert_program(self, program: Sequence[str]) -> None:
        self.programs.append(list(program))

    def insert_pcb(self, pcb: ProcessControlBlock) -> None:
        self.pcbs.append(copy.deepcopy(pcb))

    def _check_pcb(self, pcb_address: int) -> None:
        if not 0 <= pcb_address < len(self.pcbs):
            raise MemoryAccessError(f"invalid PCB address {pcb_address}")

    def update_pcb(self, pcb_address: int, pcb: ProcessControlBlock) -> None:
        self._check_pcb(pcb_address)
        self.pcbs[pcb_address] = copy.deepcopy(pcb)

    def get_instruction(self, code_address: int, pc: int) -> str:
        if not 0 <= code_address < len(self.programs):
            raise MemoryAccessError(f"invalid code address {code_address}")
        program = self.programs[code_address]
        if not 0 <= pc < len(program):
            raise MemoryAccessError(f"invalid PC {pc}")
        if self.delay > 0:
            time.sleep(self.delay)
        return program[pc]

    def get_pcb(self, pcb_address: int) -> ProcessControlBlock:
        """Return a copy of the stored PCB."""
        self._check_pcb(pcb_address)
        return copy.deepcopy(self.pcbs[pcb_address])

    def _check_value_address(self, address: int) -> None:
        if not 0 <= address < FREE_SPACE_SIZE:
            raise MemoryAccessError(f"invalid address in free space {address}")

    def get_value(self, address: int) -> int:
        self._check_value_address(address)
        return self.free_space[address]

    def set_value(self, address: int, value: int) -> None:
        self._check_value_address(address)
        self.free_space[address] = value

    def insert_page(self, page: Page) -> int:
        """Store a page in the next frame, round robin, and return its frame."""
        frame = self._next_page
        self.pages[frame] = copy.deepcopy(page)
        self._next_page = (self._next_page + 1) % self.max_pages
        self.items += 1
        return frame

    def get_page(self, page_address: int) -> Page | None:
        if not 0 <= page_address < len(self.pages):
            raise MemoryAccessError(f"invalid page address on ram {page_address}")
        return copy.deepcopy(self.pages[page_address])

    def is_full(self) -> bool:
        return self.items >= self.max_pages

    def release_page(self) -> None:
        """Mark one page frame as free again."""
        self.items -= 1


class Disk:
    """Backing store of program pages."""

    def __init__(self) -> None:
        self.pages: list[Page] = []

    def insert_page(self, page: Page) -> None:
        self.pages.append(copy.deepcopy(page))

    def get_page(self, page_address: int) -> Page:
        if not 0 <= page_address < len(self.pages):
            raise MemoryAccessError(f"invalid page address {page_address}")
        return copy.deepcopy(self.pages[page_address])