"""
ihexread - Intel HEX Reader Command-Line Interface
==================================================

This module implements the command-line interface for decoding Intel HEX
files into memory images.

Commands
--------
- **info**: Decode a file and show registers and written ranges
- **dump**: Decode a file and write the raw image or a hex listing
- **validate**: Check record syntax, checksums and the EOF terminator

Usage Examples
--------------
Show what a firmware file contains:
    $ ihexread info -m 0x10000 firmware.hex

Extract a binary image for a 32KB flash at 0x08000000:
    $ ihexread dump -m 0x8000 -a 0x08000000 -o firmware.bin firmware.hex

Validate a file without allocating memory:
    $ ihexread validate firmware.hex

Defaults for --memory-size, --start-address and --fill can be set with
the IHEX_MEMORY_SIZE, IHEX_START_ADDRESS and IHEX_FILL_VALUE environment
variables.

Copyright (c) 2026 ihex-reader Contributors
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ihex_reader import __version__
from ihex_reader.cli.errors import handle_cli_exception
from ihex_reader.config import get_default_config
from ihex_reader.errors import HexFormatError, MissingEndOfFileError
from ihex_reader.memory import MemoryBlock
from ihex_reader.parser import iter_records
from ihex_reader.reader import (
    HexFileReader,
    StartSegmentMode,
    read_hex_lines,
    validate_record,
)
from ihex_reader.records import RecordType

# Bytes per row in hex listings
ROW_SIZE = 16


# =============================================================================
# Integer Parameter Type
# =============================================================================

class IntegerParam(click.ParamType):
    """
    Click parameter type for sizes and addresses.

    Accepts decimal (4096), hexadecimal (0x1000) or binary (0b1) values.
    """
    name = "integer"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to int."""
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except ValueError:
            self.fail(f"'{value}' is not a valid integer", param, ctx)


INTEGER = IntegerParam()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _decode(
    hex_file: Path,
    memory_size: Optional[int],
    start_address: Optional[int],
    fill: Optional[int],
    legacy_start_segment: bool,
) -> MemoryBlock:
    """Decode hex_file, filling unset options from the default config."""
    config = get_default_config()
    if memory_size is None:
        memory_size = config.memory_size
    if memory_size is None:
        raise click.BadParameter(
            "memory size is required (use -m or IHEX_MEMORY_SIZE)",
            param_hint="'-m' / '--memory-size'",
        )
    if start_address is None:
        start_address = config.start_address
    if fill is None:
        fill = config.fill_value
    mode = StartSegmentMode.LEGACY if legacy_start_segment else config.start_segment_mode

    reader = HexFileReader.from_file(hex_file, memory_size, start_address)
    return reader.parse(fill_value=fill, start_segment_mode=mode)


def _written_rows(ranges: list[tuple[int, int]]) -> list[int]:
    """Start offsets of the listing rows that hold at least one written cell."""
    rows = []
    for first, end in ranges:
        row = first - first % ROW_SIZE
        if rows and rows[-1] == row:
            row += ROW_SIZE
        rows.extend(range(row, end, ROW_SIZE))
    return rows


def decode_options(func):
    """Options shared by every command that builds a memory image."""
    func = click.option(
        "--legacy-start-segment",
        is_flag=True,
        help="Compose CS/IP the way legacy readers did (b0 << (8 + b1))",
    )(func)
    func = click.option(
        "--fill",
        type=INTEGER,
        default=None,
        help="Value of unwritten cells (default: 0xFF)",
    )(func)
    func = click.option(
        "-a", "--start-address",
        type=INTEGER,
        default=None,
        help="Absolute address of the first cell (default: 0)",
    )(func)
    func = click.option(
        "-m", "--memory-size",
        type=INTEGER,
        default=None,
        help="Memory image size in bytes",
    )(func)
    return func


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="ihexread")
def main() -> None:
    """
    Intel HEX reader.

    Decode Intel HEX files into fixed-size memory images.

    \b
    Commands:
      info      Show registers and written ranges
      dump      Write the memory image or a hex listing
      validate  Check syntax, checksums and EOF terminator

    \b
    Examples:
      ihexread info -m 0x10000 firmware.hex
      ihexread dump -m 0x8000 -o firmware.bin firmware.hex
      ihexread validate firmware.hex
    """
    pass


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "hex_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@decode_options
@click.option("-v", "--verbose", is_flag=True, help="Log every record")
def cmd_info(
    hex_file: Path,
    memory_size: Optional[int],
    start_address: Optional[int],
    fill: Optional[int],
    legacy_start_segment: bool,
    verbose: bool,
) -> None:
    """
    Show information about a decoded Intel HEX file.

    \b
    Example:
      ihexread info -m 0x10000 firmware.hex
    """
    _setup_logging(verbose)
    try:
        image = _decode(hex_file, memory_size, start_address, fill, legacy_start_segment)
    except Exception as e:
        handle_cli_exception(e, verbose)

    click.echo(f"HEX File: {hex_file}")
    click.echo("=" * 40)
    click.echo(f"Memory Size:     {image.memory_size} bytes")
    click.echo(f"Start Address:   0x{image.start_address:08X}")
    click.echo(f"Fill Value:      0x{image.fill_value:02X}")
    click.echo(f"CS:IP:           {image.cs:04X}:{image.ip:04X}")
    click.echo(f"EIP:             0x{image.eip:08X}")
    highest = image.highest_modified_offset
    if highest < 0:
        click.echo("Highest Offset:  none")
    else:
        click.echo(f"Highest Offset:  0x{highest:08X}")

    ranges = image.modified_ranges()
    click.echo()
    click.echo(f"Written Ranges:  {len(ranges)}")
    for first, end in ranges:
        first_address = image.start_address + first
        last_address = image.start_address + end - 1
        click.echo(f"  0x{first_address:08X}-0x{last_address:08X}  ({end - first} bytes)")


# =============================================================================
# Dump Command
# =============================================================================

@main.command("dump")
@click.argument(
    "hex_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@decode_options
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the raw image to this file instead of a listing",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every record")
def cmd_dump(
    hex_file: Path,
    memory_size: Optional[int],
    start_address: Optional[int],
    fill: Optional[int],
    legacy_start_segment: bool,
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Dump the decoded memory image.

    Without -o, prints a hex listing of every 16-byte row that contains
    at least one written cell.

    \b
    Examples:
      ihexread dump -m 256 firmware.hex
      ihexread dump -m 0x8000 -o firmware.bin firmware.hex
    """
    _setup_logging(verbose)
    try:
        image = _decode(hex_file, memory_size, start_address, fill, legacy_start_segment)
        if output is not None:
            output.write_bytes(image.to_bytes())
    except Exception as e:
        handle_cli_exception(e, verbose)

    if output is not None:
        click.echo(f"Wrote {image.memory_size} bytes to {output}")
        return

    values = image.to_bytes()
    for row_start in _written_rows(image.modified_ranges()):
        hex_bytes = values[row_start:row_start + ROW_SIZE].hex(" ").upper()
        click.echo(f"{image.start_address + row_start:08X}  {hex_bytes}")


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "hex_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option("-v", "--verbose", is_flag=True, help="Show validation details")
def cmd_validate(hex_file: Path, verbose: bool) -> None:
    """
    Validate an Intel HEX file.

    Checks:
    - Record syntax
    - Byte counts and per-type record structure
    - Checksums
    - End Of File terminator

    \b
    Example:
      ihexread validate firmware.hex
    """
    _setup_logging(verbose)
    try:
        lines = read_hex_lines(hex_file)
        counts = {record_type: 0 for record_type in RecordType}
        for line_number, record in iter_records(lines):
            try:
                validate_record(record)
            except HexFormatError as e:
                raise e.locate(line_number, lines[line_number - 1].strip())
            counts[record.record_type] += 1
        if counts[RecordType.END_OF_FILE] == 0:
            raise MissingEndOfFileError()
    except Exception as e:
        handle_cli_exception(e, verbose)

    click.echo(f"Validation PASSED: {hex_file}")
    if verbose:
        for record_type, count in counts.items():
            click.echo(f"  {record_type.get_name():<26} {count}")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
