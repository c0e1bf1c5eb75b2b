import pytest

from evmlite.instructions import Revision
from evmlite.state import (
    STATIC_FLAG,
    ExecutionState,
    Memory,
    Message,
    Stack,
    StatusCode,
    TxContext,
)


class CountingHost:
    def __init__(self, tx: TxContext) -> None:
        self.tx = tx
        self.calls = 0

    def get_tx_context(self) -> TxContext:
        self.calls += 1
        return self.tx


def test_stack_push_pop_round_trip():
    stack = Stack()
    for v in (1, 2, 3):
        stack.push(v)
    assert list(stack) == [1, 2, 3]
    assert [stack.pop(), stack.pop(), stack.pop()] == [3, 2, 1]
    assert len(stack) == 0


def test_stack_peek():
    stack = Stack()
    stack.push(10)
    stack.push(20)
    assert stack.peek() == 20
    assert stack.peek(1) == 10
    with pytest.raises(IndexError):
        stack.peek(2)


def test_stack_underflow():
    with pytest.raises(IndexError):
        Stack().pop()


def test_stack_overflow_at_limit():
    stack = Stack()
    for v in range(Stack.LIMIT):
        stack.push(v)
    assert len(stack) == Stack.LIMIT
    with pytest.raises(OverflowError):
        stack.push(0)


@pytest.mark.parametrize("value", [-1, 1 << 256])
def test_stack_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        Stack().push(value)


def test_memory_grow_zero_fills():
    mem = Memory()
    mem.grow(32)
    assert mem.size == 32
    assert mem.data == bytes(32)
    mem[0] = 0xAA
    mem.grow(64)
    assert mem[0] == 0xAA
    assert mem[1:64] == bytes(63)
    assert mem.capacity == Memory.PAGE_SIZE


def test_memory_capacity_doubles():
    mem = Memory()
    mem.grow(Memory.PAGE_SIZE + 32)
    assert mem.capacity == 2 * Memory.PAGE_SIZE
    assert mem.size == Memory.PAGE_SIZE + 32


def test_memory_capacity_rounded_to_pages():
    mem = Memory()
    mem.grow(20000 - 20000 % 32)
    assert mem.capacity >= mem.size
    assert mem.capacity % Memory.PAGE_SIZE == 0
    assert mem.capacity - mem.size < Memory.PAGE_SIZE


@pytest.mark.parametrize("size", [31, 0])
def test_memory_grow_rejects_bad_sizes(size):
    with pytest.raises(ValueError):
        Memory().grow(size)


def test_memory_clear_keeps_capacity_and_regrows_zeroed():
    mem = Memory()
    mem.grow(Memory.PAGE_SIZE * 3)
    cap = mem.capacity
    mem[5] = 7
    mem.clear()
    assert mem.size == 0
    assert mem.capacity == cap
    mem.grow(32)
    assert mem[5] == 0


def test_memory_slice_assignment_must_keep_size():
    mem = Memory()
    mem.grow(32)
    mem[0:2] = b"\x01\x02"
    assert mem[0:3] == b"\x01\x02\x00"
    with pytest.raises(ValueError):
        mem[0:2] = b"\x01"


def test_execution_state_takes_gas_from_message():
    state = ExecutionState(Message(gas=1000), Revision.BERLIN, None, b"\x00")
    assert state.gas_left == 1000
    assert state.rev is Revision.BERLIN
    assert state.status is StatusCode.SUCCESS


def test_in_static_mode():
    assert ExecutionState(Message(flags=STATIC_FLAG)).in_static_mode() is True
    assert ExecutionState(Message(flags=0)).in_static_mode() is False


def test_tx_context_is_cached():
    host = CountingHost(TxContext(block_timestamp=0xDD, block_number=0x1100))
    state = ExecutionState(Message(), Revision.ISTANBUL, host)
    assert state.get_tx_context().block_number == 0x1100
    assert state.get_tx_context().block_timestamp == 0xDD
    assert host.calls == 1


def test_tx_context_with_zero_timestamp_is_requeried():
    host = CountingHost(TxContext(block_timestamp=0))
    state = ExecutionState(Message(), Revision.ISTANBUL, host)
    state.get_tx_context()
    state.get_tx_context()
    assert host.calls == 2


def test_reset():
    host = CountingHost(TxContext(block_timestamp=5))
    state = ExecutionState(Message(gas=10), Revision.FRONTIER, host, b"\x01")
    state.gas_refund = 3
    state.memory.grow(64)
    state.stack.push(1)
    state.status = StatusCode.REVERT
    state.output_offset, state.output_size = 4, 8
    state.return_data = b"abc"
    state.get_tx_context()

    message = Message(gas=77)
    state.reset(message, Revision.LONDON, host, b"\x02")
    assert state.gas_left == 77
    assert state.gas_refund == 0
    assert state.memory.size == 0
    assert len(state.stack) == 0
    assert state.msg is message
    assert state.rev is Revision.LONDON
    assert state.return_data == b""
    assert state.original_code == b"\x02"
    assert state.status is StatusCode.SUCCESS
    assert (state.output_offset, state.output_size) == (0, 0)
    state.get_tx_context()
    assert host.calls == 2