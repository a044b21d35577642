"""CHIP-8 ALU operations (8xxx).

Each ``alu_*`` function maps the operand values ``(vx, vy)`` to
``(result, flag)``. ``flag`` is the new VF, or ``None`` when VF is left alone.
VF is always written after VX so that ``8FY_`` forms keep the flag.
"""

from typing import Callable, Optional

from chip8vm.state import EmulatorState, write_register, write_flag
from chip8vm.decode import DecodedInstruction

AluFn = Callable[[int, int], tuple[int, Optional[int]]]


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY, VF reset."""
    return vx | vy, 0


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY, VF reset."""
    return vx & vy, 0


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY, VF reset."""
    return vx ^ vy, 0


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = not borrow."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = not borrow."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, vx >> 7


def make_alu_instruction(alu_fn: AluFn, shift: bool = False):
    """Wrap an ``alu_*`` function as a state transition.

    Shift forms take VY as their source when the original shift quirk is on.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = int(state.V[instruction.x])
        vy = int(state.V[instruction.y])
        if shift and state.quirks.original_shift_behavior:
            vx = vy

        result, flag = alu_fn(vx, vy)

        state = write_register(state, instruction.x, result)
        if flag is not None:
            state = write_flag(state, flag)
        return state
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right, shift=True)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left, shift=True)
