"""Instruction tables, gas cost tables and execution state for an EVM interpreter."""

__version__ = "0.1.0"

__all__ = ["cost_table", "instructions", "state"]