"""
Intel HEX Reader Error Hierarchy
================================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from IntelHexError, allowing callers to catch
every decode failure with a single except clause if desired.

Exception Hierarchy
-------------------
IntelHexError (base)
├── ConfigurationError - invalid arguments, empty input, missing file
├── HexFormatError - malformed line or violated record structure
│   └── ChecksumError - line checksum does not sum to zero
├── MemoryBoundsError - data record writes outside the memory image
├── MissingEndOfFileError - no End Of File record in the input
└── ReadOnlyMemoryError - write attempted on a sealed memory block

Error messages follow this format when the line is known:
    line 12: error: description
        :0300000011223398

Copyright (c) 2026 ihex-reader Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class IntelHexError(Exception):
    """
    Base exception for all Intel HEX reader errors.

    Decoding is all-or-nothing, so any of these aborts the whole decode:

        try:
            image = decode(lines, memory_size=0x10000)
        except IntelHexError as e:
            print(f"Error: {e}")
    """
    pass


class ConfigurationError(IntelHexError):
    """
    Invalid reader arguments.

    Raised before any line is parsed when:
    - Memory size is zero or negative
    - Start address is negative
    - Fill value is not a byte
    - The line sequence is empty
    - The source file does not exist
    """
    pass


# =============================================================================
# Record Format Exceptions
# =============================================================================

class HexFormatError(IntelHexError):
    """
    Malformed Intel HEX record.

    Raised when a line does not follow the record grammar, declares a
    byte count that disagrees with its data, uses an unknown record type,
    or violates a structural rule of its record type (for example an
    End Of File record with a non-zero address).

    Attributes:
        message: The error description
        line_number: 1-based line number in the input (optional)
        line: The offending line text (optional)
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.message = message
        self.line_number = line_number
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.line_number is not None:
            parts.append(f"line {self.line_number}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")
        if self.line is not None:
            parts.append(f"    {self.line}")
        return "\n".join(parts)

    def locate(self, line_number: int, line: str) -> "HexFormatError":
        """Attach the input position to this error and refresh its message."""
        self.line_number = line_number
        self.line = line
        self.args = (self._format_message(),)
        return self


class ChecksumError(HexFormatError):
    """
    Line checksum mismatch.

    The two's-complement sum of every byte on a line (length, address,
    type, data and checksum) must be zero modulo 256.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch: expected {expected:02X}, got {actual:02X}",
            line_number=line_number,
            line=line,
        )


# =============================================================================
# Decode Exceptions
# =============================================================================

class MemoryBoundsError(IntelHexError):
    """
    Data record writes outside the allocated memory image.

    Raised when an absolute address (record address + base address) is
    below the start address or at/after start address + memory size.
    """

    def __init__(self, address: int, start_address: int, memory_size: int):
        self.address = address
        self.start_address = start_address
        self.memory_size = memory_size
        super().__init__(
            f"Trying to write to address 0x{address:08X} outside of memory "
            f"boundaries (0x{start_address:08X}-0x{start_address + memory_size:08X})"
        )


class MissingEndOfFileError(IntelHexError):
    """No End Of File record was found anywhere in the input."""

    def __init__(self, message: str = "No EndOfFile marker found"):
        super().__init__(message)


class ReadOnlyMemoryError(IntelHexError):
    """Write attempted on a memory block that has already been returned."""
    pass
