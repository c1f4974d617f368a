"""
Intel HEX Reader - Decode Intel HEX Files into Memory Images
============================================================

This package decodes the Intel HEX text format into a fixed-size,
addressable memory image, ready to be flashed or loaded into an
emulator.

Main Components
---------------
- **parser**: Intel HEX line parser
    Converts one text line into a HexRecord, validating its checksum

- **reader**: Record dispatcher (decode, HexFileReader)
    Folds the records of a file into a MemoryBlock, tracking the
    extended base address and the CS:IP / EIP entry points

- **memory**: Memory image (MemoryBlock, MemoryCell)

- **cli**: Command-line tool (ihexread)

Quick Start
-----------
Decode lines already in memory:
    >>> from ihex_reader import decode
    >>> image = decode([":0300000011223397", ":00000001FF"], memory_size=16)
    >>> image[0].value, image.highest_modified_offset
    (17, 2)

Decode a file for a device whose flash starts at 0x08000000:
    >>> from ihex_reader import HexFileReader
    >>> reader = HexFileReader.from_file("firmware.hex", 0x8000, 0x08000000)
    >>> image = reader.parse()

Or use the command-line tool:
    $ ihexread info -m 0x10000 firmware.hex

Reference Documentation
-----------------------
- Intel HEX format: https://en.wikipedia.org/wiki/Intel_HEX

Copyright (c) 2026 ihex-reader Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ihex_reader.errors import (
    IntelHexError,
    ConfigurationError,
    HexFormatError,
    ChecksumError,
    MemoryBoundsError,
    MissingEndOfFileError,
    ReadOnlyMemoryError,
)
from ihex_reader.records import RecordType, HexRecord
from ihex_reader.checksum import calculate_checksum, verify_checksum
from ihex_reader.parser import parse_line, iter_records
from ihex_reader.memory import MemoryBlock, MemoryCell
from ihex_reader.reader import (
    DecodeState,
    StartSegmentMode,
    HexFileReader,
    apply_record,
    validate_record,
    decode,
    decode_file,
    read_hex_lines,
)
from ihex_reader.config import ReaderConfig, get_default_config, set_default_config

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "IntelHexError",
    "ConfigurationError",
    "HexFormatError",
    "ChecksumError",
    "MemoryBoundsError",
    "MissingEndOfFileError",
    "ReadOnlyMemoryError",
    # Records and parsing
    "RecordType",
    "HexRecord",
    "calculate_checksum",
    "verify_checksum",
    "parse_line",
    "iter_records",
    # Memory image
    "MemoryBlock",
    "MemoryCell",
    # Decoding
    "DecodeState",
    "StartSegmentMode",
    "HexFileReader",
    "apply_record",
    "validate_record",
    "decode",
    "decode_file",
    "read_hex_lines",
    # Configuration
    "ReaderConfig",
    "get_default_config",
    "set_default_config",
]
