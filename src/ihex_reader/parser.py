"""
Intel HEX Line Parser
=====================

This module turns raw text lines into HexRecord instances. Parsing is a
pure function of the line: it validates the syntax, the declared byte
count and the checksum, but not the per-type structure of the record
(that is checked by the reader when the record is dispatched).

Usage Examples
--------------
Parsing a single line:
    >>> from ihex_reader.parser import parse_line
    >>> record = parse_line(":0300000011223397")
    >>> record.record_type.name, record.data.hex()
    ('DATA', '112233')

Parsing a sequence lazily:
    >>> for line_number, record in iter_records(lines):
    ...     print(line_number, record)

Copyright (c) 2026 ihex-reader Contributors
"""

import logging
import re
from typing import Iterable, Iterator

from ihex_reader.checksum import line_sum, calculate_checksum
from ihex_reader.errors import ChecksumError, HexFormatError
from ihex_reader.records import HexRecord, RecordType

# Logger for this module
logger = logging.getLogger(__name__)

# Start code followed by whole hex-digit pairs
_LINE_PATTERN = re.compile(r":((?:[0-9A-Fa-f]{2})+)")

# Byte count (1) + address (2) + record type (1) + checksum (1)
_OVERHEAD_BYTES = 5


def parse_line(line: str) -> HexRecord:
    """
    Parse one Intel HEX line into a record.

    Args:
        line: The record text, e.g. ":0300000011223397". Surrounding
            whitespace (such as a trailing carriage return) is ignored.

    Returns:
        The decoded HexRecord

    Raises:
        HexFormatError: If the line is not a well-formed record or its
            byte count disagrees with its data
        ChecksumError: If the checksum invariant does not hold
    """
    text = line.strip()
    match = _LINE_PATTERN.fullmatch(text)
    if match is None:
        if not text.startswith(":"):
            raise HexFormatError("record does not start with ':'", line=text)
        raise HexFormatError("record contains non-hex digits or odd length", line=text)

    raw = bytes.fromhex(match.group(1))
    if len(raw) < _OVERHEAD_BYTES:
        raise HexFormatError(
            f"record too short: {len(raw)} bytes, minimum {_OVERHEAD_BYTES}",
            line=text,
        )

    byte_count = raw[0]
    address = (raw[1] << 8) | raw[2]
    data = raw[4:-1]
    checksum = raw[-1]

    if len(data) != byte_count:
        raise HexFormatError(
            f"byte count {byte_count} does not match {len(data)} data bytes",
            line=text,
        )

    if line_sum(raw) != 0:
        raise ChecksumError(
            expected=calculate_checksum(raw[:-1]),
            actual=checksum,
            line=text,
        )

    try:
        record_type = RecordType(raw[3])
    except ValueError:
        raise HexFormatError(f"unknown record type 0x{raw[3]:02X}", line=text) from None

    return HexRecord(
        record_type=record_type,
        address=address,
        byte_count=byte_count,
        data=data,
        checksum=checksum,
    )


def iter_records(lines: Iterable[str]) -> Iterator[tuple[int, HexRecord]]:
    """
    Lazily parse a sequence of lines.

    Each line is parsed only when the consumer asks for the next record,
    so a decode aborts at the first bad line without touching the rest.

    Args:
        lines: Ordered Intel HEX lines

    Yields:
        (line_number, record) pairs, line numbers starting at 1

    Raises:
        HexFormatError: With line_number set, for the first bad line
    """
    for line_number, line in enumerate(lines, start=1):
        try:
            record = parse_line(line)
        except HexFormatError as e:
            raise e.locate(line_number, line.strip())
        logger.debug(f"line {line_number}: {record}")
        yield line_number, record
