"""
Intel HEX Checksum Calculations
===============================

Each record ends with a checksum byte chosen so that the sum of every
byte on the line (byte count, address high/low, record type, data and
the checksum itself) is zero modulo 256.

    checksum = (-(sum of preceding bytes)) & 0xFF

Example:
    >>> hex(calculate_checksum(bytes.fromhex("03000000112233")))
    '0x97'
"""


def line_sum(raw: bytes) -> int:
    """
    Sum every byte of a record, truncated to 8 bits.

    Args:
        raw: All bytes of the line, including the trailing checksum

    Returns:
        0 for a record with a valid checksum
    """
    return sum(raw) & 0xFF


def calculate_checksum(fields: bytes) -> int:
    """
    Calculate the checksum byte for the given record fields.

    Args:
        fields: Byte count, address, type and data bytes (no checksum)

    Returns:
        The two's complement of the 8-bit sum of fields
    """
    return (-sum(fields)) & 0xFF


def verify_checksum(raw: bytes) -> bool:
    """
    Verify a complete record's checksum.

    Args:
        raw: All bytes of the line, including the trailing checksum

    Returns:
        True if the bytes sum to zero modulo 256
    """
    return line_sum(raw) == 0
