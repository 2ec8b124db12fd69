import pytest

from coresim.alu import Alu

PAIRS = [(3, 4), (-8, 5), (0, 7), (12, -3), (-6, -6)]


@pytest.mark.parametrize("a,b", PAIRS)
def test_add_sub_inverse(a, b):
    alu = Alu()
    assert alu.sub(alu.add(a, b), b) == a


@pytest.mark.parametrize("a,b", PAIRS)
def test_mul_div_inverse(a, b):
    alu = Alu()
    assert alu.div(alu.mul(a, b), b) == a


def test_div_truncates_toward_zero():
    alu = Alu()
    assert alu.div(-7, 2) == -3
    assert alu.div(7, -2) == alu.div(-7, 2)
    assert alu.div(-7, -2) == -alu.div(-7, 2)


def test_div_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        Alu().div(1, 0)


@pytest.mark.parametrize("a,b", PAIRS)
def test_comparisons(a, b):
    alu = Alu()
    assert alu.slt(a, b) == (1 if a < b else 0)
    assert alu.diff(a, b) is (not alu.equal(a, b))
    assert alu.equal(a, a) is True