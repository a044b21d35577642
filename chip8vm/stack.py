"""CHIP-8 stack operations."""

from chip8vm.constants import ADDRESS_MASK
from chip8vm.errors import StackUnderflow
from chip8vm.state import StackState


def push(stack: StackState, address: int) -> StackState:
    """Push address onto stack."""
    return stack.replace(data=stack.data + (int(address) & ADDRESS_MASK,))


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop address from stack.

    Raises:
        StackUnderflow: if the stack is empty
    """
    if not stack.data:
        raise StackUnderflow()
    return stack.replace(data=stack.data[:-1]), stack.data[-1]
