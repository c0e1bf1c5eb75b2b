"""Per-revision base gas cost tables used by the baseline interpreter."""

from __future__ import annotations

from .instructions import GAS_COSTS, Revision

#: A 256-entry table of base gas costs; negative entries mark undefined opcodes.
CostTable = tuple[int, ...]

_COST_TABLES: dict[Revision, CostTable] = {rev: GAS_COSTS[rev] for rev in Revision}


def get_baseline_cost_table(rev: int) -> CostTable:
    """Return the base gas cost table of revision *rev*.

    Raises ValueError for an unknown revision.
    """
    return _COST_TABLES[Revision(rev)]