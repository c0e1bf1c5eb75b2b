"""EVM opcodes, revisions, per-revision base gas costs and instruction traits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Revision(IntEnum):
    """EVM revisions (hard forks) in chronological order."""

    FRONTIER = 0
    HOMESTEAD = 1
    TANGERINE_WHISTLE = 2
    SPURIOUS_DRAGON = 3
    BYZANTIUM = 4
    CONSTANTINOPLE = 5
    PETERSBURG = 6
    ISTANBUL = 7
    BERLIN = 8
    LONDON = 9
    PARIS = 10
    SHANGHAI = 11
    CANCUN = 12


MAX_REVISION = max(Revision)


class Opcode(IntEnum):
    """Known EVM instruction opcodes."""

    STOP = 0x00
    ADD = 0x01
    MUL = 0x02
    SUB = 0x03
    DIV = 0x04
    SDIV = 0x05
    MOD = 0x06
    SMOD = 0x07
    ADDMOD = 0x08
    MULMOD = 0x09
    EXP = 0x0A
    SIGNEXTEND = 0x0B

    LT = 0x10
    GT = 0x11
    SLT = 0x12
    SGT = 0x13
    EQ = 0x14
    ISZERO = 0x15
    AND = 0x16
    OR = 0x17
    XOR = 0x18
    NOT = 0x19
    BYTE = 0x1A
    SHL = 0x1B
    SHR = 0x1C
    SAR = 0x1D

    KECCAK256 = 0x20

    ADDRESS = 0x30
    BALANCE = 0x31
    ORIGIN = 0x32
    CALLER = 0x33
    CALLVALUE = 0x34
    CALLDATALOAD = 0x35
    CALLDATASIZE = 0x36
    CALLDATACOPY = 0x37
    CODESIZE = 0x38
    CODECOPY = 0x39
    GASPRICE = 0x3A
    EXTCODESIZE = 0x3B
    EXTCODECOPY = 0x3C
    RETURNDATASIZE = 0x3D
    RETURNDATACOPY = 0x3E
    EXTCODEHASH = 0x3F

    BLOCKHASH = 0x40
    COINBASE = 0x41
    TIMESTAMP = 0x42
    NUMBER = 0x43
    PREVRANDAO = 0x44
    GASLIMIT = 0x45
    CHAINID = 0x46
    SELFBALANCE = 0x47
    BASEFEE = 0x48

    POP = 0x50
    MLOAD = 0x51
    MSTORE = 0x52
    MSTORE8 = 0x53
    SLOAD = 0x54
    SSTORE = 0x55
    JUMP = 0x56
    JUMPI = 0x57
    PC = 0x58
    MSIZE = 0x59
    GAS = 0x5A
    JUMPDEST = 0x5B

    PUSH0 = 0x5F
    PUSH1 = 0x60
    PUSH2 = 0x61
    PUSH3 = 0x62
    PUSH4 = 0x63
    PUSH5 = 0x64
    PUSH6 = 0x65
    PUSH7 = 0x66
    PUSH8 = 0x67
    PUSH9 = 0x68
    PUSH10 = 0x69
    PUSH11 = 0x6A
    PUSH12 = 0x6B
    PUSH13 = 0x6C
    PUSH14 = 0x6D
    PUSH15 = 0x6E
    PUSH16 = 0x6F
    PUSH17 = 0x70
    PUSH18 = 0x71
    PUSH19 = 0x72
    PUSH20 = 0x73
    PUSH21 = 0x74
    PUSH22 = 0x75
    PUSH23 = 0x76
    PUSH24 = 0x77
    PUSH25 = 0x78
    PUSH26 = 0x79
    PUSH27 = 0x7A
    PUSH28 = 0x7B
    PUSH29 = 0x7C
    PUSH30 = 0x7D
    PUSH31 = 0x7E
    PUSH32 = 0x7F

    DUP1 = 0x80
    DUP2 = 0x81
    DUP3 = 0x82
    DUP4 = 0x83
    DUP5 = 0x84
    DUP6 = 0x85
    DUP7 = 0x86
    DUP8 = 0x87
    DUP9 = 0x88
    DUP10 = 0x89
    DUP11 = 0x8A
    DUP12 = 0x8B
    DUP13 = 0x8C
    DUP14 = 0x8D
    DUP15 = 0x8E
    DUP16 = 0x8F

    SWAP1 = 0x90
    SWAP2 = 0x91
    SWAP3 = 0x92
    SWAP4 = 0x93
    SWAP5 = 0x94
    SWAP6 = 0x95
    SWAP7 = 0x96
    SWAP8 = 0x97
    SWAP9 = 0x98
    SWAP10 = 0x99
    SWAP11 = 0x9A
    SWAP12 = 0x9B
    SWAP13 = 0x9C
    SWAP14 = 0x9D
    SWAP15 = 0x9E
    SWAP16 = 0x9F

    LOG0 = 0xA0
    LOG1 = 0xA1
    LOG2 = 0xA2
    LOG3 = 0xA3
    LOG4 = 0xA4

    CREATE = 0xF0
    CALL = 0xF1
    CALLCODE = 0xF2
    RETURN = 0xF3
    DELEGATECALL = 0xF4
    CREATE2 = 0xF5
    STATICCALL = 0xFA
    REVERT = 0xFD
    INVALID = 0xFE
    SELFDESTRUCT = 0xFF


#: Gas cost marking an instruction as undefined in a given revision.
UNDEFINED = -1

# EIP-2929 constants.
COLD_SLOAD_COST = 2100
COLD_ACCOUNT_ACCESS_COST = 2600
WARM_STORAGE_READ_COST = 100
#: Extra cost charged on top of the warm cost when an account access turns out cold.
ADDITIONAL_COLD_ACCOUNT_ACCESS_COST = COLD_ACCOUNT_ACCESS_COST - WARM_STORAGE_READ_COST


def _check_opcode(op: int) -> int:
    op = int(op)
    if not 0 <= op <= 0xFF:
        raise ValueError(f"opcode out of range: {op}")
    return op


def _range(first: Opcode, last: Opcode) -> range:
    return range(first, last + 1)


def _build_gas_costs() -> tuple[tuple[int, ...], ...]:
    O = Opcode
    frontier = [UNDEFINED] * 256
    frontier_costs = {
        O.STOP: 0, O.ADD: 3, O.MUL: 5, O.SUB: 3, O.DIV: 5, O.SDIV: 5, O.MOD: 5,
        O.SMOD: 5, O.ADDMOD: 8, O.MULMOD: 8, O.EXP: 10, O.SIGNEXTEND: 5,
        O.LT: 3, O.GT: 3, O.SLT: 3, O.SGT: 3, O.EQ: 3, O.ISZERO: 3, O.AND: 3,
        O.OR: 3, O.XOR: 3, O.NOT: 3, O.BYTE: 3, O.KECCAK256: 30,
        O.ADDRESS: 2, O.BALANCE: 20, O.ORIGIN: 2, O.CALLER: 2, O.CALLVALUE: 2,
        O.CALLDATALOAD: 3, O.CALLDATASIZE: 2, O.CALLDATACOPY: 3, O.CODESIZE: 2,
        O.CODECOPY: 3, O.GASPRICE: 2, O.EXTCODESIZE: 20, O.EXTCODECOPY: 20,
        O.BLOCKHASH: 20, O.COINBASE: 2, O.TIMESTAMP: 2, O.NUMBER: 2,
        O.PREVRANDAO: 2, O.GASLIMIT: 2, O.POP: 2, O.MLOAD: 3, O.MSTORE: 3,
        O.MSTORE8: 3, O.SLOAD: 50, O.SSTORE: 0, O.JUMP: 8, O.JUMPI: 10,
        O.PC: 2, O.MSIZE: 2, O.GAS: 2, O.JUMPDEST: 1,
        O.CREATE: 32000, O.CALL: 40, O.CALLCODE: 40, O.RETURN: 0,
        O.INVALID: 0, O.SELFDESTRUCT: 0,
    }
    for op, cost in frontier_costs.items():
        frontier[op] = cost
    for op in (*_range(O.PUSH1, O.PUSH32), *_range(O.DUP1, O.DUP16), *_range(O.SWAP1, O.SWAP16)):
        frontier[op] = 3
    for op in _range(O.LOG0, O.LOG4):
        frontier[op] = (op - O.LOG0 + 1) * 375

    warm = WARM_STORAGE_READ_COST
    changes: dict[Revision, dict[Opcode, int]] = {
        Revision.HOMESTEAD: {O.DELEGATECALL: 40},
        Revision.TANGERINE_WHISTLE: {
            O.BALANCE: 400, O.EXTCODESIZE: 700, O.EXTCODECOPY: 700, O.SLOAD: 200,
            O.CALL: 700, O.CALLCODE: 700, O.DELEGATECALL: 700, O.SELFDESTRUCT: 5000,
        },
        Revision.SPURIOUS_DRAGON: {},
        Revision.BYZANTIUM: {
            O.RETURNDATASIZE: 2, O.RETURNDATACOPY: 3, O.STATICCALL: 700, O.REVERT: 0,
        },
        Revision.CONSTANTINOPLE: {
            O.SHL: 3, O.SHR: 3, O.SAR: 3, O.EXTCODEHASH: 400, O.CREATE2: 32000,
        },
        Revision.PETERSBURG: {},
        Revision.ISTANBUL: {
            O.BALANCE: 700, O.CHAINID: 2, O.EXTCODEHASH: 700, O.SELFBALANCE: 5,
            O.SLOAD: 800,
        },
        Revision.BERLIN: {
            O.EXTCODESIZE: warm, O.EXTCODECOPY: warm, O.EXTCODEHASH: warm,
            O.BALANCE: warm, O.CALL: warm, O.CALLCODE: warm, O.DELEGATECALL: warm,
            O.STATICCALL: warm, O.SLOAD: warm,
        },
        Revision.LONDON: {O.BASEFEE: 2},
        Revision.PARIS: {},
        Revision.SHANGHAI: {O.PUSH0: 2},
        Revision.CANCUN: {},
    }

    tables = [tuple(frontier)]
    current = frontier
    for rev in list(Revision)[1:]:
        current = list(current)
        for op, cost in changes[rev].items():
            current[op] = cost
        tables.append(tuple(current))
    return tuple(tables)


#: Base gas costs indexed by revision, then by opcode.
GAS_COSTS: tuple[tuple[int, ...], ...] = _build_gas_costs()


def gas_cost(rev: int, op: int) -> int:
    """Return the base gas cost of *op* in *rev*, or UNDEFINED."""
    return GAS_COSTS[Revision(rev)][_check_opcode(op)]


def has_const_gas_cost(op: int) -> bool:
    """Tell whether *op* has the same base cost in every revision.

    Instructions introduced after Frontier never qualify, because they are
    undefined in the first revision.
    """
    op = _check_opcode(op)
    first = GAS_COSTS[Revision.FRONTIER][op]
    return all(table[op] == first for table in GAS_COSTS)


@dataclass(frozen=True)
class Traits:
    """Revision independent properties of an EVM instruction."""

    name: str | None = None
    immediate_size: int = 0
    is_terminating: bool = False
    stack_height_required: int = 0
    stack_height_change: int = 0
    since: Revision | None = None


def _build_traits() -> tuple[Traits, ...]:
    O = Opcode
    R = Revision
    table = [Traits()] * 256

    def define(op: Opcode, required: int, change: int, since: Revision = R.FRONTIER,
               terminating: bool = False, immediate: int = 0) -> None:
        table[op] = Traits(op.name, immediate, terminating, required, change, since)

    define(O.STOP, 0, 0, terminating=True)
    for op in (O.ADD, O.MUL, O.SUB, O.DIV, O.SDIV, O.MOD, O.SMOD, O.EXP, O.SIGNEXTEND,
               O.LT, O.GT, O.SLT, O.SGT, O.EQ, O.AND, O.OR, O.XOR, O.BYTE, O.KECCAK256):
        define(op, 2, -1)
    define(O.ADDMOD, 3, -2)
    define(O.MULMOD, 3, -2)
    define(O.ISZERO, 1, 0)
    define(O.NOT, 1, 0)
    for op in (O.SHL, O.SHR, O.SAR):
        define(op, 2, -1, R.CONSTANTINOPLE)

    for op in (O.ADDRESS, O.ORIGIN, O.CALLER, O.CALLVALUE, O.CALLDATASIZE, O.CODESIZE,
               O.GASPRICE, O.COINBASE, O.TIMESTAMP, O.NUMBER, O.PREVRANDAO, O.GASLIMIT,
               O.PC, O.MSIZE, O.GAS):
        define(op, 0, 1)
    for op in (O.BALANCE, O.CALLDATALOAD, O.EXTCODESIZE, O.BLOCKHASH, O.MLOAD, O.SLOAD):
        define(op, 1, 0)
    define(O.CALLDATACOPY, 3, -3)
    define(O.CODECOPY, 3, -3)
    define(O.EXTCODECOPY, 4, -4)
    define(O.RETURNDATASIZE, 0, 1, R.BYZANTIUM)
    define(O.RETURNDATACOPY, 3, -3, R.BYZANTIUM)
    define(O.EXTCODEHASH, 1, 0, R.CONSTANTINOPLE)
    define(O.CHAINID, 0, 1, R.ISTANBUL)
    define(O.SELFBALANCE, 0, 1, R.ISTANBUL)
    define(O.BASEFEE, 0, 1, R.LONDON)

    define(O.POP, 1, -1)
    define(O.MSTORE, 2, -2)
    define(O.MSTORE8, 2, -2)
    define(O.SSTORE, 2, -2)
    define(O.JUMP, 1, -1)
    define(O.JUMPI, 2, -2)
    define(O.JUMPDEST, 0, 0)

    define(O.PUSH0, 0, 1, R.SHANGHAI)
    for n, op in enumerate(_range(O.PUSH1, O.PUSH32), start=1):
        define(O(op), 0, 1, immediate=n)
    for n, op in enumerate(_range(O.DUP1, O.DUP16), start=1):
        define(O(op), n, 1)
    for n, op in enumerate(_range(O.SWAP1, O.SWAP16), start=1):
        define(O(op), n + 1, 0)
    for n, op in enumerate(_range(O.LOG0, O.LOG4)):
        define(O(op), n + 2, -(n + 2))

    define(O.CREATE, 3, -2)
    define(O.CALL, 7, -6)
    define(O.CALLCODE, 7, -6)
    define(O.RETURN, 2, -2, terminating=True)
    define(O.DELEGATECALL, 6, -5, R.HOMESTEAD)
    define(O.CREATE2, 4, -3, R.CONSTANTINOPLE)
    define(O.STATICCALL, 6, -5, R.BYZANTIUM)
    define(O.REVERT, 2, -2, R.BYZANTIUM, terminating=True)
    define(O.INVALID, 0, 0, terminating=True)
    define(O.SELFDESTRUCT, 1, -1, terminating=True)
    return tuple(table)


#: Traits of all 256 opcodes; undefined opcodes carry default Traits().
TRAITS: tuple[Traits, ...] = _build_traits()


def is_small_push(op: int) -> bool:
    """Tell whether *op* is one of PUSH1..PUSH8."""
    return Opcode.PUSH1 <= op <= Opcode.PUSH8


def is_large_push(op: int) -> bool:
    """Tell whether *op* is one of PUSH9..PUSH32."""
    return Opcode.PUSH9 <= op <= Opcode.PUSH32