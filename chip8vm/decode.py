"""CHIP-8 instruction decoding."""

from enum import Enum

from chex import dataclass

from chip8vm.errors import UnknownOpcode


class Op(Enum):
    """Every instruction form the engine executes."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_BYTE = "3XNN"
    SNE_BYTE = "4XNN"
    SE_REG = "5XY0"
    LD_BYTE = "6XNN"
    ADD_BYTE = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I_VX = "FX1E"
    LD_F_VX = "FX29"
    LD_B_VX = "FX33"
    LD_I_VX = "FX55"
    LD_VX_I = "FX65"


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Families selected by the first nibble alone
_FAMILIES = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM = {0x00E0: Op.CLS, 0x00EE: Op.RET}

_REGISTER_COMPARE = {0x5: Op.SE_REG, 0x9: Op.SNE_REG}

_ALU = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEYS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}


def identify(instruction: int) -> Op:
    """Map a 16-bit word to its instruction form.

    Raises:
        UnknownOpcode: if the word matches no form
    """
    family = (instruction & 0xF000) >> 12
    op = None
    if family in _FAMILIES:
        op = _FAMILIES[family]
    elif family == 0x0:
        op = _SYSTEM.get(instruction)
    elif family in _REGISTER_COMPARE:
        if instruction & 0x000F == 0:
            op = _REGISTER_COMPARE[family]
    elif family == 0x8:
        op = _ALU.get(instruction & 0x000F)
    elif family == 0xE:
        op = _KEYS.get(instruction & 0x00FF)
    elif family == 0xF:
        op = _MISC.get(instruction & 0x00FF)

    if op is None:
        raise UnknownOpcode(instruction)
    return op


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction)
    return DecodedInstruction(
        raw=instruction,
        op=identify(instruction),
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
