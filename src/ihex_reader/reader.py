"""
Intel HEX Reader
================

This module folds a sequence of Intel HEX records into a MemoryBlock.

Decoding is strictly sequential: Extended Segment / Extended Linear
Address records change the base address added to every following Data
record, so the state after record N is an input to record N + 1. That
state is carried explicitly in a DecodeState value returned by
apply_record() for every record.

Usage Examples
--------------
Decoding lines already in memory:
    >>> from ihex_reader import decode
    >>> image = decode([":0300000011223397", ":00000001FF"], memory_size=16)
    >>> image.highest_modified_offset
    2

Decoding a file:
    >>> reader = HexFileReader.from_file("firmware.hex", memory_size=0x10000)
    >>> image = reader.parse()
    >>> print(f"Entry point: 0x{image.eip:08X}")

Start Segment Address
---------------------
StartSegmentMode.STANDARD composes CS and IP as big-endian words.
StartSegmentMode.LEGACY reproduces readers that evaluated
``b0 << 8 + b1`` with C operator precedence, i.e. ``b0 << (8 + b1)``
on a 32-bit int with the shift count masked to 5 bits, then truncated
to 16 bits. Use it only to reproduce images from such tools.

Copyright (c) 2026 ihex-reader Contributors
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Sequence, Union
import logging

from ihex_reader.errors import (
    ConfigurationError,
    HexFormatError,
    MemoryBoundsError,
    MissingEndOfFileError,
)
from ihex_reader.memory import MemoryBlock
from ihex_reader.parser import iter_records
from ihex_reader.records import HexRecord, RecordType

# Logger for this module
logger = logging.getLogger(__name__)


class StartSegmentMode(Enum):
    """How Start Segment Address records compose the CS and IP registers."""
    STANDARD = "standard"
    LEGACY = "legacy"


@dataclass(frozen=True)
class DecodeState:
    """
    State threaded from one record to the next.

    Attributes:
        base_address: Offset added to Data record addresses
        end_of_file_seen: True once an End Of File record was processed
    """
    base_address: int = 0
    end_of_file_seen: bool = False


# =============================================================================
# Per-type structural validation
# =============================================================================

def _validate_end_of_file(record: HexRecord) -> None:
    record.require(record.address == 0, "address should equal zero")
    record.require(record.byte_count == 0, "byte count should be zero")
    record.require(len(record.data) == 0, "number of bytes should be zero")
    record.require(record.checksum == 0xFF, "checksum should be 0xFF")


def _validate_extended_address(record: HexRecord) -> None:
    record.require(record.byte_count == 2, "byte count should be 2")


def _validate_start_address(record: HexRecord) -> None:
    record.require(record.byte_count == 4, "byte count should be 4")
    record.require(record.address == 0, "address should be zero")


_VALIDATORS: dict[RecordType, Callable[[HexRecord], None]] = {
    RecordType.DATA: lambda record: None,
    RecordType.END_OF_FILE: _validate_end_of_file,
    RecordType.EXTENDED_SEGMENT_ADDRESS: _validate_extended_address,
    RecordType.EXTENDED_LINEAR_ADDRESS: _validate_extended_address,
    RecordType.START_SEGMENT_ADDRESS: _validate_start_address,
    RecordType.START_LINEAR_ADDRESS: _validate_start_address,
}


def validate_record(record: HexRecord) -> None:
    """
    Check the type-specific structure of a record.

    Raises:
        HexFormatError: If the record violates the rules of its type
    """
    _VALIDATORS[record.record_type](record)


# =============================================================================
# Register composition
# =============================================================================

def _legacy_word(high: int, low: int) -> int:
    return (high << ((8 + low) & 0x1F)) & 0xFFFF


def compose_start_segment(data: bytes, mode: StartSegmentMode) -> tuple[int, int]:
    """
    Compose CS and IP from the four data bytes of a Start Segment record.

    Args:
        data: The record's data bytes (CS high, CS low, IP high, IP low)
        mode: Composition rule

    Returns:
        (cs, ip) tuple
    """
    if mode is StartSegmentMode.LEGACY:
        return _legacy_word(data[0], data[1]), _legacy_word(data[2], data[3])
    return (data[0] << 8) | data[1], (data[2] << 8) | data[3]


# =============================================================================
# Record dispatch
# =============================================================================

def apply_record(
    state: DecodeState,
    record: HexRecord,
    image: MemoryBlock,
    start_segment_mode: StartSegmentMode = StartSegmentMode.STANDARD,
) -> DecodeState:
    """
    Apply one record to the memory image.

    Args:
        state: State left by the previous record
        record: The record to apply
        image: Memory block being decoded into
        start_segment_mode: CS/IP composition rule

    Returns:
        The state for the next record

    Raises:
        HexFormatError: If the record violates the rules of its type
        MemoryBoundsError: If a Data record writes outside the image
    """
    validate_record(record)
    record_type = record.record_type
    data = record.data

    if record_type is RecordType.DATA:
        address = record.address + state.base_address
        memory_size = image.memory_size
        for i, value in enumerate(data):
            index = address + i - image.start_address
            if not 0 <= index < memory_size:
                raise MemoryBoundsError(address + i, image.start_address, memory_size)
            image.store(index, value)
        return state

    elif record_type is RecordType.END_OF_FILE:
        return replace(state, end_of_file_seen=True)

    elif record_type is RecordType.EXTENDED_SEGMENT_ADDRESS:
        base_address = record.word << 4
        logger.debug(f"Segment base address 0x{base_address:08X}")
        return replace(state, base_address=base_address)

    elif record_type is RecordType.EXTENDED_LINEAR_ADDRESS:
        base_address = record.word << 16
        logger.debug(f"Linear base address 0x{base_address:08X}")
        return replace(state, base_address=base_address)

    elif record_type is RecordType.START_SEGMENT_ADDRESS:
        cs, ip = compose_start_segment(data, start_segment_mode)
        image.set_start_segment(cs, ip)
        return state

    elif record_type is RecordType.START_LINEAR_ADDRESS:
        image.set_start_linear((data[0] << 24) | (data[1] << 16) | (data[2] << 8) | data[3])
        return state

    raise AssertionError(f"unhandled record type {record_type!r}")


# =============================================================================
# Decoding entry points
# =============================================================================

def _as_lines(lines: Iterable[str]) -> Sequence[str]:
    if isinstance(lines, str):
        return lines.splitlines()
    return lines if isinstance(lines, Sequence) else list(lines)


def _check_arguments(memory_size: int, start_address: int, fill_value: int) -> None:
    if memory_size <= 0:
        raise ConfigurationError("Memory size must be greater than zero")
    if start_address < 0:
        raise ConfigurationError("Start address can not be negative")
    if not 0 <= fill_value <= 0xFF:
        raise ConfigurationError(f"Fill value must be a byte, got {fill_value}")


def decode(
    lines: Iterable[str],
    memory_size: int,
    start_address: int = 0,
    fill_value: int = 0xFF,
    start_segment_mode: StartSegmentMode = StartSegmentMode.STANDARD,
) -> MemoryBlock:
    """
    Decode Intel HEX lines into a memory image.

    Args:
        lines: Ordered Intel HEX lines (a single str is split into lines)
        memory_size: Number of bytes in the image
        start_address: Absolute address of the first cell
        fill_value: Value of cells no Data record writes
        start_segment_mode: CS/IP composition rule

    Returns:
        The sealed MemoryBlock

    Raises:
        ConfigurationError: For invalid arguments or empty input
        HexFormatError: For the first malformed record
        MemoryBoundsError: If a Data record writes outside the image
        MissingEndOfFileError: If no End Of File record is present
    """
    lines = _as_lines(lines)
    if not lines:
        raise ConfigurationError("Hex file contents can not be empty")
    _check_arguments(memory_size, start_address, fill_value)

    image = MemoryBlock(memory_size, fill_value, start_address)
    state = DecodeState()
    for line_number, record in iter_records(lines):
        try:
            state = apply_record(state, record, image, start_segment_mode)
        except HexFormatError as e:
            raise e.locate(line_number, lines[line_number - 1].strip())

    if not state.end_of_file_seen:
        raise MissingEndOfFileError()

    image.seal()
    logger.info(
        f"Decoded {len(lines)} records into {memory_size} bytes "
        f"(highest modified offset {image.highest_modified_offset})"
    )
    return image


def decode_file(
    path: Union[str, Path],
    memory_size: int,
    start_address: int = 0,
    fill_value: int = 0xFF,
    start_segment_mode: StartSegmentMode = StartSegmentMode.STANDARD,
) -> MemoryBlock:
    """Read and decode an Intel HEX file from disk. See decode()."""
    return HexFileReader.from_file(path, memory_size, start_address).parse(
        fill_value=fill_value,
        start_segment_mode=start_segment_mode,
    )


def read_hex_lines(path: Union[str, Path]) -> list[str]:
    """
    Read the lines of an Intel HEX file.

    The file is read as bytes and each line is decoded as ASCII, so a
    stray non-ASCII byte is reported on the line that contains it.

    Raises:
        ConfigurationError: If the file does not exist or is empty
        HexFormatError: If a line contains a non-ASCII byte
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"File {path} does not exist")

    lines = []
    for line_number, raw in enumerate(path.read_bytes().splitlines(), start=1):
        try:
            lines.append(raw.decode("ascii"))
        except UnicodeDecodeError as e:
            raise HexFormatError(
                f"non-ASCII byte 0x{raw[e.start]:02X} at column {e.start + 1}",
                line_number=line_number,
                line=raw.decode("ascii", errors="backslashreplace").strip(),
            ) from e
    if not lines:
        raise ConfigurationError("Hex file contents can not be empty")
    return lines


class HexFileReader:
    """
    Reader bound to one HEX source and memory layout.

    Arguments are validated at construction, so a reader that exists
    can always attempt parse().

    Example:
        >>> reader = HexFileReader.from_file("firmware.hex", 0x8000, 0x08000000)
        >>> image = reader.parse()
    """

    def __init__(self, lines: Iterable[str], memory_size: int, start_address: int = 0):
        """
        Create a reader over in-memory lines.

        Args:
            lines: Ordered Intel HEX lines
            memory_size: Number of bytes in the image
            start_address: Absolute address of the first cell

        Raises:
            ConfigurationError: If lines is empty or memory_size <= 0
        """
        self.lines = _as_lines(lines)
        if not self.lines:
            raise ConfigurationError("Hex file contents can not be empty")
        _check_arguments(memory_size, start_address, 0xFF)
        self.memory_size = memory_size
        self.start_address = start_address

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        memory_size: int,
        start_address: int = 0,
    ) -> "HexFileReader":
        """
        Create a reader from a HEX file.

        Raises:
            ConfigurationError: If the file does not exist or is empty
            HexFormatError: If a line contains a non-ASCII byte
        """
        return cls(read_hex_lines(path), memory_size, start_address)

    def parse(
        self,
        fill_value: int = 0xFF,
        start_segment_mode: StartSegmentMode = StartSegmentMode.STANDARD,
    ) -> MemoryBlock:
        """Decode the loaded lines. See decode()."""
        return decode(
            self.lines,
            self.memory_size,
            self.start_address,
            fill_value=fill_value,
            start_segment_mode=start_segment_mode,
        )
