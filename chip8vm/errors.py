"""Errors raised by the CHIP-8 engine."""


class EmulatorError(Exception):
    """Base class for every engine fault."""

    def at(self, address: int) -> "EmulatorError":
        """Return this fault tagged with the address of the faulting instruction."""
        return self


class UnknownOpcode(EmulatorError):
    """Raised when an instruction word matches no known form."""

    def __init__(self, opcode: int, address: int = None):
        self.opcode = opcode
        self.address = address
        if address is None:
            message = f"Unknown opcode 0x{opcode:04X}"
        else:
            message = f"Unknown opcode 0x{opcode:04X} at 0x{address:03X}"
        super().__init__(message)

    def at(self, address: int) -> "UnknownOpcode":
        return UnknownOpcode(self.opcode, address)


class StackUnderflow(EmulatorError):
    """Raised when 00EE executes with an empty call stack."""

    def __init__(self, address: int = None):
        self.address = address
        location = "" if address is None else f" at 0x{address:03X}"
        super().__init__(f"Return with empty call stack{location}")

    def at(self, address: int) -> "StackUnderflow":
        return StackUnderflow(address)


class OutOfBoundsLoad(EmulatorError):
    """Raised when a program image does not fit between 0x200 and 0xFFF."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes exceeds the {capacity} bytes available")


class InvalidQuirkKey(EmulatorError):
    """Raised when a quirk mapping names an unrecognized quirk."""

    def __init__(self, keys):
        self.keys = tuple(sorted(keys))
        super().__init__(f"Unknown quirk(s): {', '.join(self.keys)}")


class InvalidKey(EmulatorError):
    """Raised when a key index is outside 0-15."""

    def __init__(self, key: int):
        self.key = key
        super().__init__(f"Key {key!r} is not a CHIP-8 key (0-15)")
