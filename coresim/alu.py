"""Arithmetic logic unit."""


class Alu:
    """Integer arithmetic and comparisons used by the control unit."""

    def add(self, a: int, b: int) -> int:
        return a + b

    def sub(self, a: int, b: int) -> int:
        return a - b

    def mul(self, a: int, b: int) -> int:
        return a * b

    def div(self, a: int, b: int) -> int:
        """Integer division truncating toward zero."""
        if b == 0:
            raise ZeroDivisionError("division by zero")
        quotient = abs(a) // abs(b)
        return quotient if (a < 0) == (b < 0) else -quotient

    def slt(self, a: int, b: int) -> int:
        return int(a < b)

    def diff(self, a: int, b: int) -> bool:
        return a != b

    def equal(self, a: int, b: int) -> bool:
        return a == b