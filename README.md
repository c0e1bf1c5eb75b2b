# evmlite

Building blocks for an Ethereum Virtual Machine interpreter, in pure Python:

- `evmlite.instructions`: the `Opcode` and `Revision` enums, per-revision base gas
  costs (`gas_cost`, `GAS_COSTS`, `has_const_gas_cost`), the EIP-2929 access cost
  constants, and per-instruction `Traits` (name, immediate size, whether it
  terminates execution, stack items required, stack height change, and the
  revision that introduced it) in the `TRAITS` table. `is_small_push` and
  `is_large_push` classify PUSH1..PUSH8 and PUSH9..PUSH32.
- `evmlite.cost_table`: `get_baseline_cost_table(rev)`, the 256-entry base gas cost
  table of a revision, with `-1` (`instructions.UNDEFINED`) for opcodes that the
  revision does not define.
- `evmlite.state`: `StatusCode`, `Message`, `TxContext`, the 1024-item `Stack` of
  256-bit words, the word-aligned, zero-filled `Memory`, and `ExecutionState`, which
  ties them together for a single call.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Examples

Gas costs and traits:

```python
from evmlite.instructions import TRAITS, Opcode, Revision, gas_cost, has_const_gas_cost

gas_cost(Revision.BERLIN, Opcode.SLOAD)     # 100
gas_cost(Revision.FRONTIER, Opcode.SHL)     # -1, undefined before Constantinople
has_const_gas_cost(Opcode.ADD)              # True
TRAITS[Opcode.PUSH2].immediate_size         # 2
TRAITS[Opcode.SWAP1].stack_height_required  # 2
```

The cost table for one revision:

```python
from evmlite.cost_table import get_baseline_cost_table
from evmlite.instructions import Opcode, Revision

table = get_baseline_cost_table(Revision.SHANGHAI)
table[Opcode.PUSH0]                         # 2
```

Stack and memory:

```python
from evmlite.state import Memory, Stack

stack = Stack()
stack.push(1)
stack.push(2)
stack.peek(1)                               # 1
stack.pop()                                 # 2

memory = Memory()
memory.grow(64)                             # must be a multiple of 32 and larger than now
memory.size                                 # 64
memory[0:4]                                 # b"\x00\x00\x00\x00"
```

`Stack.push` raises `OverflowError` beyond 1024 items, and `Stack.pop` and
`Stack.peek` raise `IndexError` on underflow. `Memory.grow` raises `ValueError` for a
size that is not a multiple of 32 or not larger than the current size.

Execution state:

```python
from evmlite.instructions import Revision
from evmlite.state import STATIC_FLAG, ExecutionState, Message, TxContext

class Host:
    def get_tx_context(self):
        return TxContext(block_number=1, block_timestamp=1_700_000_000)

state = ExecutionState(msg=Message(gas=1000, flags=STATIC_FLAG),
                       rev=Revision.BERLIN, host=Host())
state.gas_left                              # 1000
state.in_static_mode()                      # True
state.get_tx_context().block_number         # 1, fetched from the host once and cached
```

`ExecutionState.reset` prepares the same object for another message, clearing the
stack, memory, return data, output and the cached transaction context.

## What this package does not do

It has no interpreter loop and no instruction implementations: it cannot run
bytecode, analyse jump destinations or charge gas during execution. It does not
recognise or validate EOF containers, and it provides no host, account or storage
model beyond the `get_tx_context` hook that `ExecutionState` calls. There is no
command-line tool.

## Running the tests

```
pytest
```