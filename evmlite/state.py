"""Execution state shared by instruction implementations: stack, memory and context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator, Protocol

from .instructions import Revision

#: Message flag marking a static (read-only) call.
STATIC_FLAG = 1


class StatusCode(IntEnum):
    """Outcome of an execution."""

    SUCCESS = 0
    FAILURE = 1
    REVERT = 2
    OUT_OF_GAS = 3
    INVALID_INSTRUCTION = 4
    UNDEFINED_INSTRUCTION = 5
    STACK_OVERFLOW = 6
    STACK_UNDERFLOW = 7
    BAD_JUMP_DESTINATION = 8
    INVALID_MEMORY_ACCESS = 9
    CALL_DEPTH_EXCEEDED = 10
    STATIC_MODE_VIOLATION = 11
    PRECOMPILE_FAILURE = 12
    CONTRACT_VALIDATION_FAILURE = 13
    ARGUMENT_OUT_OF_RANGE = 14
    INTERNAL_ERROR = -1
    REJECTED = -2
    OUT_OF_MEMORY = -3


@dataclass
class Message:
    """A call or create message being executed."""

    gas: int = 0
    flags: int = 0
    depth: int = 0
    recipient: bytes = bytes(20)
    sender: bytes = bytes(20)
    input_data: bytes = b""
    value: int = 0
    code_address: bytes = bytes(20)


@dataclass
class TxContext:
    """Transaction and block information supplied by the host."""

    tx_gas_price: int = 0
    tx_origin: bytes = bytes(20)
    block_coinbase: bytes = bytes(20)
    block_number: int = 0
    block_timestamp: int = 0
    block_gas_limit: int = 0
    block_prev_randao: int = 0
    chain_id: int = 0
    block_base_fee: int = 0


class _Host(Protocol):
    def get_tx_context(self) -> TxContext: ...


_WORD_LIMIT = 1 << 256


class Stack:
    """The EVM stack of 256-bit words, limited to LIMIT items."""

    LIMIT = 1024

    def __init__(self) -> None:
        self._items: list[int] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        """Iterate from the bottom to the top."""
        return iter(self._items)

    def push(self, value: int) -> None:
        """Push a word; raises OverflowError when the stack is full."""
        if not 0 <= value < _WORD_LIMIT:
            raise ValueError(f"value does not fit in 256 bits: {value}")
        if len(self._items) >= self.LIMIT:
            raise OverflowError("stack overflow")
        self._items.append(value)

    def pop(self) -> int:
        """Remove and return the top word; raises IndexError on an empty stack."""
        if not self._items:
            raise IndexError("stack underflow")
        return self._items.pop()

    def peek(self, depth: int = 0) -> int:
        """Return the word *depth* items below the top (0 is the top)."""
        if not 0 <= depth < len(self._items):
            raise IndexError("stack underflow")
        return self._items[-1 - depth]

    def clear(self) -> None:
        self._items.clear()


class Memory:
    """The EVM memory, grown in 32-byte words and zero-filled on growth.

    Capacity starts at one page and doubles, or is rounded up to whole pages
    when doubling is not enough.
    """

    PAGE_SIZE = 4 * 1024

    def __init__(self) -> None:
        self._data = bytearray()
        self._capacity = self.PAGE_SIZE

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, key: int | slice) -> int | bytes:
        if isinstance(key, slice):
            return bytes(self._data[key])
        return self._data[key]

    def __setitem__(self, key: int | slice, value: Any) -> None:
        if isinstance(key, slice):
            start, stop, step = key.indices(len(self._data))
            if len(range(start, stop, step)) != len(value):
                raise ValueError("memory assignment must not change its size")
        self._data[key] = value

    def grow(self, new_size: int) -> None:
        """Grow to *new_size* bytes, a multiple of 32 larger than the current size."""
        if new_size % 32 != 0:
            raise ValueError(f"memory size must be a multiple of 32: {new_size}")
        if new_size <= len(self._data):
            raise ValueError(f"memory can only grow: {new_size} <= {len(self._data)}")
        if new_size > self._capacity:
            self._capacity *= 2
            if self._capacity < new_size:
                pages = -(-new_size // self.PAGE_SIZE)
                self._capacity = pages * self.PAGE_SIZE
        self._data.extend(bytes(new_size - len(self._data)))

    def clear(self) -> None:
        """Set the size to 0, keeping the capacity."""
        self._data.clear()


@dataclass
class ExecutionState:
    """Mutable state of a single execution."""

    msg: Message | None = None
    rev: Revision = Revision.FRONTIER
    host: _Host | None = None
    original_code: bytes = b""
    gas_left: int = 0
    gas_refund: int = 0
    memory: Memory = field(default_factory=Memory)
    return_data: bytes = b""
    status: StatusCode = StatusCode.SUCCESS
    output_offset: int = 0
    output_size: int = 0
    analysis: Any = None
    stack: Stack = field(default_factory=Stack)
    _tx: TxContext = field(default_factory=TxContext, repr=False)

    def __post_init__(self) -> None:
        self.rev = Revision(self.rev)
        if self.msg is not None and self.gas_left == 0:
            self.gas_left = self.msg.gas

    def reset(self, message: Message, revision: int, host: _Host, code: bytes) -> None:
        """Reset the state so that it can be reused for another execution."""
        self.gas_left = message.gas
        self.gas_refund = 0
        self.memory.clear()
        self.msg = message
        self.host = host
        self.rev = Revision(revision)
        self.return_data = b""
        self.original_code = code
        self.status = StatusCode.SUCCESS
        self.output_offset = 0
        self.output_size = 0
        self.stack.clear()
        self._tx = TxContext()

    def in_static_mode(self) -> bool:
        """Tell whether the current message is a static call."""
        if self.msg is None:
            raise RuntimeError("no message is being executed")
        return (self.msg.flags & STATIC_FLAG) != 0

    def get_tx_context(self) -> TxContext:
        """Return the transaction context, querying the host on first use."""
        if self._tx.block_timestamp == 0:
            if self.host is None:
                raise RuntimeError("no host to query the transaction context from")
            self._tx = self.host.get_tx_context()
        return self._tx