import pytest

from evmlite.cost_table import get_baseline_cost_table
from evmlite.instructions import UNDEFINED, Opcode, Revision, gas_cost


@pytest.mark.parametrize("rev", list(Revision))
def test_table_matches_gas_costs(rev):
    table = get_baseline_cost_table(rev)
    assert len(table) == 256
    assert all(table[op] == gas_cost(rev, op) for op in range(256))


def test_table_is_shared():
    assert get_baseline_cost_table(Revision.LONDON) is get_baseline_cost_table(9)


def test_undefined_entries_kept():
    assert get_baseline_cost_table(Revision.PARIS)[Opcode.PUSH0] == UNDEFINED
    assert get_baseline_cost_table(Revision.SHANGHAI)[Opcode.PUSH0] >= 0


def test_unknown_revision():
    with pytest.raises(ValueError):
        get_baseline_cost_table(99)