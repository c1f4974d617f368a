"""
Intel HEX Record Definitions
============================

This module defines the data structures for Intel HEX records. Each text
line of a HEX file decodes to exactly one record.

Line Format
-----------
    :LLAAAATT[DD...]CC

    Field   Digits  Description
    -----   ------  -----------
    :       1       Start code
    LL      2       Byte count (number of data bytes)
    AAAA    4       16-bit address (big-endian)
    TT      2       Record type
    DD      2*LL    Data bytes
    CC      2       Checksum (two's complement of the sum of all other bytes)

Record Types
------------
- 00: Data
- 01: End Of File
- 02: Extended Segment Address (base = value << 4)
- 03: Start Segment Address (CS:IP entry point)
- 04: Extended Linear Address (base = value << 16)
- 05: Start Linear Address (EIP entry point)

Reference
---------
- https://en.wikipedia.org/wiki/Intel_HEX
"""

from dataclasses import dataclass
from enum import IntEnum

from ihex_reader.errors import HexFormatError


class RecordType(IntEnum):
    """Intel HEX record type identifiers."""
    DATA = 0x00
    END_OF_FILE = 0x01
    EXTENDED_SEGMENT_ADDRESS = 0x02
    START_SEGMENT_ADDRESS = 0x03
    EXTENDED_LINEAR_ADDRESS = 0x04
    START_LINEAR_ADDRESS = 0x05

    def get_name(self) -> str:
        """Get a human-readable name for this record type."""
        names = {
            RecordType.DATA: "Data",
            RecordType.END_OF_FILE: "End Of File",
            RecordType.EXTENDED_SEGMENT_ADDRESS: "Extended Segment Address",
            RecordType.START_SEGMENT_ADDRESS: "Start Segment Address",
            RecordType.EXTENDED_LINEAR_ADDRESS: "Extended Linear Address",
            RecordType.START_LINEAR_ADDRESS: "Start Linear Address",
        }
        return names[self]


@dataclass(frozen=True)
class HexRecord:
    """
    A single decoded Intel HEX line.

    Records are produced by the line parser, which guarantees that
    len(data) == byte_count and that the checksum invariant holds.
    Type-specific structure (expected byte count, zero address) is only
    checked later, when the record is dispatched.

    Attributes:
        record_type: The record type
        address: 16-bit address field of the line
        byte_count: Declared number of data bytes
        data: The data bytes
        checksum: Checksum byte as read from the line
    """
    record_type: RecordType
    address: int
    byte_count: int
    data: bytes
    checksum: int

    def require(self, condition: bool, message: str) -> None:
        """
        Fail with a HexFormatError unless condition holds.

        Args:
            condition: Structural predicate already evaluated on this record
            message: What the record should have looked like

        Raises:
            HexFormatError: If condition is False
        """
        if not condition:
            raise HexFormatError(f"{self.record_type.get_name()} record: {message}")

    @property
    def word(self) -> int:
        """First two data bytes as a big-endian 16-bit value."""
        return (self.data[0] << 8) | self.data[1]

    def __str__(self) -> str:
        return (
            f"{self.record_type.get_name()} @ 0x{self.address:04X} "
            f"({self.byte_count} bytes)"
        )
