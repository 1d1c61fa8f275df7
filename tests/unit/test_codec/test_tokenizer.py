"""Tests for the description line tokenizer."""

import pytest

from src.codec.tokenizer import Section, TokenKind, tokenize


@pytest.mark.unit
def test_markers_for_sections():
    """Test marker labels."""
    assert Section.PROPERTY_DETAILS.marker == "**Property Details:**"
    assert Section.LICENSE.marker == "**License:**"


@pytest.mark.unit
def test_tokenize_classifies_lines():
    """Test that each line is tagged as marker, blank or text."""
    tokens = tokenize("Lovely place\n\n**Meal Plans:** breakfast\n  **License:**  KA-1 ")
    assert [t.kind for t in tokens] == [TokenKind.TEXT, TokenKind.BLANK, TokenKind.MARKER, TokenKind.MARKER]
    assert tokens[2].section == Section.MEAL_PLANS
    assert tokens[2].payload == "breakfast"
    assert tokens[3].section == Section.LICENSE
    assert tokens[3].payload == "KA-1"
    assert [t.line_number for t in tokens] == [1, 2, 3, 4]


@pytest.mark.unit
def test_tokenize_preserves_raw_text():
    """Test that joining raw lines restores the input exactly."""
    text = "First line\r\n\r\n**Arrival Instructions:**\r\n  Ring twice  \n"
    tokens = tokenize(text)
    assert "\n".join(t.raw for t in tokens) == text
    assert tokens[0].content == "First line"


@pytest.mark.unit
def test_inline_marker_text_is_not_a_marker():
    """Test that a marker must start the line."""
    tokens = tokenize("See **License:** below")
    assert tokens[0].kind == TokenKind.TEXT
