"""
Memory Image for Decoded HEX Files
==================================

A MemoryBlock is the result of decoding an Intel HEX file: a fixed-size,
addressable array of byte cells plus the x86 entry-point registers that
Start Segment / Start Linear Address records can set.

Memory Layout:
    cell index 0                -> absolute address start_address
    cell index memory_size - 1  -> absolute address start_address + memory_size - 1

The start address lets microcontrollers whose memory does not begin at
0x00000000 avoid populating a vast unused range.

Cell values and modified flags are stored in two contiguous bytearrays.
MemoryCell objects are created only when a cell is read.

Registers:
    CS   Code Segment (16-bit)
    IP   Instruction Pointer (16-bit)
    EIP  Extended Instruction Pointer (32-bit, 80386 and later)

Copyright (c) 2026 ihex-reader Contributors
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterator, Union

from ihex_reader.errors import ReadOnlyMemoryError


@dataclass(frozen=True)
class MemoryCell:
    """
    A single byte of the memory image.

    Attributes:
        offset: Index of the cell (offset from the block's start address)
        value: Byte value, the fill value unless written by a Data record
        modified: True once a Data record has written this cell
    """
    offset: int
    value: int
    modified: bool = False


class MemoryCells(Sequence):
    """Read-only sequence view over the cells of a MemoryBlock."""

    def __init__(self, values: bytearray, modified: bytearray):
        self._values = values
        self._modified = modified

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(f"cell index {index} out of range")
        return MemoryCell(index, self._values[index], bool(self._modified[index]))

    def __iter__(self) -> Iterator[MemoryCell]:
        for i in range(len(self._values)):
            yield MemoryCell(i, self._values[i], bool(self._modified[i]))


class MemoryBlock:
    """
    An ordered collection of memory cells and CPU registers.

    The block is writable while a reader decodes into it. The reader
    seals it before handing it to the caller, after which every write
    raises ReadOnlyMemoryError.

    Attributes:
        start_address: Absolute address of cell 0
        fill_value: Value of cells no Data record has written
        cs: Code Segment register
        ip: Instruction Pointer register
        eip: Extended Instruction Pointer register

    Example:
        >>> block = MemoryBlock(16)
        >>> block.store(2, 0x33)
        >>> block[2]
        MemoryCell(offset=2, value=51, modified=True)
        >>> block.highest_modified_offset
        2
    """

    def __init__(self, memory_size: int, fill_value: int = 0xFF, start_address: int = 0):
        """
        Allocate a memory block.

        Args:
            memory_size: Number of cells (bytes)
            fill_value: Initial value of every cell
            start_address: Absolute address of cell 0
        """
        self._start_address = start_address
        self._fill_value = fill_value
        self._cs = 0
        self._ip = 0
        self._eip = 0
        self._values = bytearray([fill_value]) * memory_size
        self._modified = bytearray(memory_size)
        self._sealed = False

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def start_address(self) -> int:
        """Absolute address of cell 0."""
        return self._start_address

    @property
    def fill_value(self) -> int:
        """Value of cells no Data record has written."""
        return self._fill_value

    @property
    def cs(self) -> int:
        return self._cs

    @property
    def ip(self) -> int:
        return self._ip

    @property
    def eip(self) -> int:
        return self._eip

    @property
    def memory_size(self) -> int:
        """Size of this memory, in bytes."""
        return len(self._values)

    @property
    def cells(self) -> MemoryCells:
        """Memory cells in this block."""
        return MemoryCells(self._values, self._modified)

    @property
    def highest_modified_offset(self) -> int:
        """Index of the highest modified cell, or -1 if none was written."""
        return self._modified.rfind(1)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: Union[int, slice]):
        return self.cells[index]

    def to_bytes(self) -> bytes:
        """Return every cell value as a bytes object."""
        return bytes(self._values)

    def modified_ranges(self) -> list[tuple[int, int]]:
        """
        Find the runs of written cells.

        Returns:
            List of (first, end) index pairs, end exclusive, in address order
        """
        ranges = []
        start = None
        for i, flag in enumerate(self._modified):
            if flag and start is None:
                start = i
            elif not flag and start is not None:
                ranges.append((start, i))
                start = None
        if start is not None:
            ranges.append((start, len(self._modified)))
        return ranges

    # -------------------------------------------------------------------------
    # Write access (used by the reader while decoding)
    # -------------------------------------------------------------------------

    def _check_writable(self) -> None:
        if self._sealed:
            raise ReadOnlyMemoryError("memory block is sealed and cannot be modified")

    def store(self, offset: int, value: int) -> None:
        """
        Write a byte to a cell and mark it modified.

        Args:
            offset: Cell index (already relative to start_address)
            value: Byte value
        """
        self._check_writable()
        self._values[offset] = value & 0xFF
        self._modified[offset] = 1

    def set_start_segment(self, cs: int, ip: int) -> None:
        """Set the CS:IP entry point."""
        self._check_writable()
        self._cs = cs & 0xFFFF
        self._ip = ip & 0xFFFF

    def set_start_linear(self, eip: int) -> None:
        """Set the EIP entry point."""
        self._check_writable()
        self._eip = eip & 0xFFFFFFFF

    def seal(self) -> None:
        """Make this block read-only."""
        self._sealed = True

    def __repr__(self) -> str:
        return (
            f"MemoryBlock(memory_size={self.memory_size}, "
            f"start_address=0x{self.start_address:08X}, "
            f"highest_modified_offset={self.highest_modified_offset})"
        )
