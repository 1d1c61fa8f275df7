"""Line tokenizer for descriptions carrying embedded metadata sections."""

from enum import Enum
from typing import NamedTuple, Optional


class Section(str, Enum):
    """Sections that can be embedded in a description, with their marker labels."""
    PROPERTY_DETAILS = "Property Details"
    ARRIVAL_INSTRUCTIONS = "Arrival Instructions"
    MEAL_PLANS = "Meal Plans"
    LICENSE = "License"

    @property
    def marker(self) -> str:
        return f"**{self.value}:**"


class TokenKind(str, Enum):
    MARKER = "marker"
    BLANK = "blank"
    TEXT = "text"


class Token(NamedTuple):
    kind: TokenKind
    line_number: int
    raw: str
    section: Optional[Section] = None
    payload: str = ""

    @property
    def content(self) -> str:
        """Line text without the trailing carriage return."""
        return self.raw.rstrip("\r")


def _match_marker(line: str) -> Optional[tuple[Section, str]]:
    stripped = line.strip()
    for section in Section:
        if stripped.startswith(section.marker):
            return section, stripped[len(section.marker):].strip()
    return None


def tokenize(text: str) -> list[Token]:
    """Classify every line of ``text``. Joining ``raw`` values with newlines restores the input."""
    tokens = []
    for index, line in enumerate(text.split("\n"), start=1):
        marker = _match_marker(line)
        if marker is not None:
            section, payload = marker
            tokens.append(Token(TokenKind.MARKER, index, line, section, payload))
        elif not line.strip():
            tokens.append(Token(TokenKind.BLANK, index, line))
        else:
            tokens.append(Token(TokenKind.TEXT, index, line))
    return tokens
