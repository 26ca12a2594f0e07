"""
Tests for offset to line/column mapping
"""
from jsonlens.core.json_diagnostics import line_start_offsets, position_from_offset


def test_first_character_is_line_one_column_one():
    pos = position_from_offset("ab\ncd", 0)
    assert (pos.line, pos.column, pos.offset) == (1, 1, 0)


def test_offset_after_newline_starts_next_line():
    pos = position_from_offset("ab\ncd", 3)
    assert (pos.line, pos.column) == (2, 1)


def test_newline_character_belongs_to_its_line():
    pos = position_from_offset("ab\ncd", 2)
    assert (pos.line, pos.column) == (1, 3)


def test_offsets_are_clamped():
    assert position_from_offset("ab\ncd", 99).offset == 5
    assert (position_from_offset("ab\ncd", 99).line, position_from_offset("ab\ncd", 99).column) == (2, 3)
    assert position_from_offset("ab", -4).offset == 0


def test_empty_text_maps_to_origin():
    pos = position_from_offset("", 10)
    assert (pos.line, pos.column, pos.offset) == (1, 1, 0)


def test_line_start_offsets():
    assert line_start_offsets("a\nbc\n") == [0, 2, 5]
    assert line_start_offsets("") == [0]
