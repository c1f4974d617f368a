"""
Memory Image Unit Tests
=======================

Tests for MemoryBlock and MemoryCell.
"""

import pytest

from ihex_reader.errors import ReadOnlyMemoryError
from ihex_reader.memory import MemoryBlock, MemoryCell


# =============================================================================
# Construction
# =============================================================================

class TestMemoryBlockInit:
    """Test MemoryBlock allocation."""

    def test_size(self):
        block = MemoryBlock(16)
        assert block.memory_size == 16
        assert len(block) == 16
        assert len(block.cells) == 16

    def test_default_fill(self):
        """Cells default to 0xFF, the erased EPROM value."""
        block = MemoryBlock(4)
        assert all(cell.value == 0xFF for cell in block.cells)
        assert not any(cell.modified for cell in block.cells)

    def test_custom_fill(self):
        block = MemoryBlock(4, fill_value=0x00)
        assert block.to_bytes() == b"\x00\x00\x00\x00"

    def test_start_address(self):
        block = MemoryBlock(4, start_address=0x08000000)
        assert block.start_address == 0x08000000

    def test_fill_value(self):
        assert MemoryBlock(4).fill_value == 0xFF
        assert MemoryBlock(4, fill_value=0x00).fill_value == 0x00

    def test_layout_is_read_only(self):
        """start_address and fill_value cannot be reassigned."""
        block = MemoryBlock(4, start_address=0x100)
        with pytest.raises(AttributeError):
            block.start_address = 0
        with pytest.raises(AttributeError):
            block.fill_value = 0
        assert block.start_address == 0x100

    def test_registers_default_zero(self):
        block = MemoryBlock(1)
        assert (block.cs, block.ip, block.eip) == (0, 0, 0)

    def test_cell_offsets(self):
        """Every cell knows its own index."""
        block = MemoryBlock(8)
        assert [cell.offset for cell in block.cells] == list(range(8))


# =============================================================================
# Cell Access
# =============================================================================

class TestMemoryCells:
    """Test read access to cells."""

    def test_getitem(self):
        block = MemoryBlock(4)
        block.store(1, 0x42)
        assert block[1] == MemoryCell(offset=1, value=0x42, modified=True)
        assert block[0] == MemoryCell(offset=0, value=0xFF, modified=False)

    def test_negative_index(self):
        block = MemoryBlock(4)
        block.store(3, 0x10)
        assert block[-1].offset == 3
        assert block[-1].value == 0x10

    def test_index_out_of_range(self):
        block = MemoryBlock(4)
        with pytest.raises(IndexError):
            block[4]

    def test_slice(self):
        block = MemoryBlock(8)
        block.store(2, 0xAA)
        cells = block[1:4]
        assert [cell.offset for cell in cells] == [1, 2, 3]
        assert [cell.modified for cell in cells] == [False, True, False]

    def test_cells_are_snapshots(self):
        """MemoryCell values are immutable views."""
        block = MemoryBlock(2)
        with pytest.raises(AttributeError):
            block[0].value = 1


# =============================================================================
# Writes and Derived Values
# =============================================================================

class TestMemoryBlockWrites:
    """Test writes, sealing and derived values."""

    def test_store_masks_to_byte(self):
        block = MemoryBlock(1)
        block.store(0, 0x1FF)
        assert block[0].value == 0xFF
        assert block[0].modified

    def test_highest_modified_none(self):
        """-1 when nothing was written."""
        assert MemoryBlock(16).highest_modified_offset == -1

    def test_highest_modified_order_independent(self):
        block = MemoryBlock(16)
        block.store(10, 0)
        block.store(3, 0)
        assert block.highest_modified_offset == 10

    def test_highest_modified_last_cell(self):
        block = MemoryBlock(16)
        block.store(15, 0)
        assert block.highest_modified_offset == 15

    def test_writing_fill_value_still_marks_modified(self):
        block = MemoryBlock(4)
        block.store(2, 0xFF)
        assert block.highest_modified_offset == 2

    def test_modified_ranges(self):
        block = MemoryBlock(10)
        for offset in (1, 2, 3, 6, 9):
            block.store(offset, 0)
        assert block.modified_ranges() == [(1, 4), (6, 7), (9, 10)]

    def test_modified_ranges_empty(self):
        assert MemoryBlock(4).modified_ranges() == []

    def test_registers(self):
        block = MemoryBlock(1)
        block.set_start_segment(0x1234, 0x5678)
        block.set_start_linear(0x08000000)
        assert block.cs == 0x1234
        assert block.ip == 0x5678
        assert block.eip == 0x08000000

    def test_seal(self):
        """A sealed block rejects every write."""
        block = MemoryBlock(4)
        block.store(0, 1)
        block.seal()
        assert block.sealed
        with pytest.raises(ReadOnlyMemoryError):
            block.store(1, 2)
        with pytest.raises(ReadOnlyMemoryError):
            block.set_start_segment(1, 2)
        with pytest.raises(ReadOnlyMemoryError):
            block.set_start_linear(1)
        assert block[0].value == 1

    def test_repr(self):
        block = MemoryBlock(16, start_address=0x100)
        assert "memory_size=16" in repr(block)
        assert "0x00000100" in repr(block)
