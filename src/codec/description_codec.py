"""Embed structured listing metadata in the description column and extract it again.

Wire format (matches records already stored)::

    <user description>

    **Property Details:**
    - Check-in: 15:00 | Check-out: 11:00
    - Minimum Stay: 2 night(s)
    - Cancellation Policy: moderate
    - Payment Methods: card, cash
    - Contact: +91 98765 43210

    **Arrival Instructions:**
    <free text, may span lines>

    **Meal Plans:** breakfast, half_board

    **License:** KA-2024-001

Decoding reads the text as a sequence of blocks. A marker line opens a
section. Property Details runs until a blank line or the next marker,
Arrival Instructions until the next marker or the end of the text, and
Meal Plans / License are single lines. Every recognised marker is consumed;
when a section repeats, the later occurrence wins, since encoding always
appends the sections after the prose. Property Details lines are parsed one
by one and a line that cannot be parsed is left verbatim in the clean
description.
"""

import re
from typing import Any, Optional, Union

from src.codec.tokenizer import Section, Token, TokenKind, tokenize
from src.models.property import BookingDetails, DecodedDescription, EmbeddedMetadata
from src.utils.errors import CodecParseWarning
from src.utils.logging import get_structured_logger, sanitize_message_text

logger = get_structured_logger(__name__)

DETAIL_CHECK_IN = "Check-in"
DETAIL_CHECK_OUT = "Check-out"
DETAIL_MINIMUM_STAY = "Minimum Stay"
DETAIL_CANCELLATION = "Cancellation Policy"
DETAIL_PAYMENT = "Payment Methods"
DETAIL_CONTACT = "Contact"

_DETAIL_FIELDS = {
    DETAIL_CHECK_IN: "check_in_time",
    DETAIL_CHECK_OUT: "check_out_time",
    DETAIL_MINIMUM_STAY: "minimum_stay",
    DETAIL_CANCELLATION: "cancellation_policy",
    DETAIL_PAYMENT: "payment_methods",
    DETAIL_CONTACT: "contact_phone",
}

_MINIMUM_STAY_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(?:night\(s\)|nights?)?$", re.IGNORECASE)
_STAY_UNIT_ONLY_RE = re.compile(r"^(?:night\(s\)|nights?)?$", re.IGNORECASE)

# Returned by the detail value parser for a present but unreadable value
_INVALID = object()

# Fields a dedicated column may also carry; the column wins when non-empty
RECONCILED_FIELDS = (
    "contact_phone",
    "license_number",
    "arrival_instructions",
    "meal_plans",
    "check_in_time",
    "check_out_time",
    "minimum_stay",
    "cancellation_policy",
    "payment_methods",
)


class SectionBlock:
    """Tokens belonging to one recognised section."""

    def __init__(self, section: Section, tokens: list[Token]):
        self.section = section
        self.tokens = tokens

    @property
    def marker(self) -> Token:
        return self.tokens[0]

    def payload_lines(self) -> list[tuple[int, str, str]]:
        """(line number, text, raw) for the inline payload (if any) and each body line."""
        lines = []
        if self.marker.payload:
            lines.append((self.marker.line_number, self.marker.payload, self.marker.payload))
        lines.extend((token.line_number, token.content, token.raw) for token in self.tokens[1:])
        return lines


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _join_prose(kept: list[Optional[str]]) -> str:
    """Join kept lines; where a block was removed (``None``) leave one blank line."""
    lines: list[str] = []
    gap = False
    for line in kept:
        if line is None:
            while lines and not lines[-1].strip():
                lines.pop()
            gap = True
            continue
        if gap:
            if not line.strip():
                continue
            if lines:
                lines.append("")
            gap = False
        lines.append(line)
    return "\n".join(lines).strip()


def read_blocks(tokens: list[Token]) -> list[Union[Token, SectionBlock]]:
    """Group tokens into prose tokens and section blocks."""
    blocks: list[Union[Token, SectionBlock]] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.kind != TokenKind.MARKER:
            blocks.append(token)
            i += 1
            continue

        body = [token]
        i += 1
        if token.section == Section.PROPERTY_DETAILS:
            while i < len(tokens) and tokens[i].kind == TokenKind.TEXT:
                body.append(tokens[i])
                i += 1
        elif token.section == Section.ARRIVAL_INSTRUCTIONS:
            while i < len(tokens) and tokens[i].kind != TokenKind.MARKER:
                body.append(tokens[i])
                i += 1
            # Trailing blank lines separate sections; they are not instructions
            while len(body) > 1 and body[-1].kind == TokenKind.BLANK:
                body.pop()
                i -= 1
        blocks.append(SectionBlock(token.section, body))
    return blocks


class DescriptionCodec:
    """Encodes draft metadata into the description column and decodes it back."""

    def encode(self, snapshot: dict[str, Any]) -> str:
        """Build the persisted description from a draft snapshot (``FieldStore.get_all()``)."""
        parts = []
        prose = (snapshot.get("description") or "").strip()
        if prose:
            parts.append(prose)

        details = self._encode_details(snapshot)
        if details:
            parts.append("\n".join([Section.PROPERTY_DETAILS.marker] + details))

        arrival = (snapshot.get("arrival_instructions") or "").strip()
        if arrival:
            parts.append(f"{Section.ARRIVAL_INSTRUCTIONS.marker}\n{arrival}")

        meal_plans = [plan.strip() for plan in snapshot.get("meal_plans") or [] if plan.strip()]
        if meal_plans:
            parts.append(f"{Section.MEAL_PLANS.marker} {', '.join(meal_plans)}")

        license_number = (snapshot.get("license_number") or "").strip()
        if license_number:
            parts.append(f"{Section.LICENSE.marker} {license_number}")

        return "\n\n".join(parts)

    def _encode_details(self, snapshot: dict[str, Any]) -> list[str]:
        lines = []
        times = []
        check_in = (snapshot.get("check_in_time") or "").strip()
        check_out = (snapshot.get("check_out_time") or "").strip()
        if check_in:
            times.append(f"{DETAIL_CHECK_IN}: {check_in}")
        if check_out:
            times.append(f"{DETAIL_CHECK_OUT}: {check_out}")
        if times:
            lines.append(f"- {' | '.join(times)}")

        minimum_stay = snapshot.get("minimum_stay")
        if isinstance(minimum_stay, (int, float)) and not isinstance(minimum_stay, bool):
            lines.append(f"- {DETAIL_MINIMUM_STAY}: {_format_number(minimum_stay)} night(s)")

        cancellation = (snapshot.get("cancellation_policy") or "").strip()
        if cancellation:
            lines.append(f"- {DETAIL_CANCELLATION}: {cancellation}")

        payment_methods = [m.strip() for m in snapshot.get("payment_methods") or [] if m.strip()]
        if payment_methods:
            lines.append(f"- {DETAIL_PAYMENT}: {', '.join(payment_methods)}")

        contact = (snapshot.get("contact_phone") or "").strip()
        if contact:
            lines.append(f"- {DETAIL_CONTACT}: {contact}")
        return lines

    def decode(self, text: Optional[str]) -> DecodedDescription:
        """Split a stored description into user prose and embedded fields."""
        if not text:
            return DecodedDescription()

        metadata: dict[str, Any] = {}
        booking: dict[str, Any] = {}
        warnings: list[CodecParseWarning] = []
        seen: set[Section] = set()
        # None marks the place of a removed block
        kept: list[Optional[str]] = []

        for block in read_blocks(tokenize(text)):
            if isinstance(block, Token):
                kept.append(block.raw)
                continue

            if block.section in seen:
                self._record_warning(
                    warnings,
                    CodecParseWarning(block.section.value, "duplicate section", block.marker.line_number),
                    block.marker.content,
                )
            seen.add(block.section)

            values, leftover = self._parse_block(block, warnings)
            kept.append(None)
            if leftover:
                kept.extend(leftover)
                kept.append(None)

            for key, value in values.items():
                if key in EmbeddedMetadata.model_fields:
                    metadata[key] = value
                else:
                    booking[key] = value

        return DecodedDescription(
            clean_description=_join_prose(kept),
            metadata=EmbeddedMetadata(**metadata),
            booking=BookingDetails(**booking),
            warnings=warnings,
        )

    def _record_warning(self, warnings: list[CodecParseWarning], warning: CodecParseWarning, excerpt: str) -> None:
        warnings.append(warning)
        logger.warning(
            "Embedded description content not parsed",
            section=warning.section,
            reason=warning.reason,
            line_number=warning.line_number,
            excerpt=sanitize_message_text(excerpt, max_length=120),
        )

    def _parse_block(self, block: SectionBlock, warnings: list[CodecParseWarning]) -> tuple[dict, list[str]]:
        """Values found in a block, plus raw lines that must stay in the prose."""
        lines = block.payload_lines()
        section = block.section

        if section == Section.PROPERTY_DETAILS:
            return self._parse_details(lines, warnings)

        # Empty sections carry no user text; they are consumed and the fields keep defaults
        if section == Section.ARRIVAL_INSTRUCTIONS:
            instructions = "\n".join(text for _, text, _ in lines).strip()
            return ({"arrival_instructions": instructions} if instructions else {}), []

        payload = block.marker.payload
        if section == Section.MEAL_PLANS:
            plans = _split_csv(payload)
            return ({"meal_plans": plans} if plans else {}), []

        return ({"license_number": payload} if payload else {}), []

    def _parse_details(
        self, lines: list[tuple[int, str, str]], warnings: list[CodecParseWarning]
    ) -> tuple[dict, list[str]]:
        section = Section.PROPERTY_DETAILS.value
        values: dict[str, Any] = {}
        leftover: list[str] = []
        for line_number, text, raw in lines:
            entries, reason = self._parse_detail_line(text)
            if reason is not None:
                self._record_warning(warnings, CodecParseWarning(section, reason, line_number), text)
                leftover.append(raw)
                continue
            for label, field, value in entries:
                if field in values:
                    self._record_warning(
                        warnings, CodecParseWarning(section, f"repeated entry: {label}", line_number), text
                    )
                values[field] = value
        return values, leftover

    def _parse_detail_line(self, text: str) -> tuple[list[tuple[str, str, Any]], Optional[str]]:
        """Entries of one detail line, or the reason the line cannot be read."""
        item = text.strip()
        if item.startswith("-"):
            item = item[1:].strip()
        entries = []
        for segment in item.split("|"):
            label, sep, value = segment.partition(":")
            label = label.strip()
            field = _DETAIL_FIELDS.get(label)
            if not sep or field is None:
                return [], f"unrecognised line: {label or item}"
            parsed = self._parse_detail_value(label, value.strip())
            if parsed is _INVALID:
                return [], f"invalid value for {label}"
            if parsed is not None:
                entries.append((label, field, parsed))
        return entries, None

    def _parse_detail_value(self, label: str, value: str) -> Any:
        """Parsed value, None when blank, or ``_INVALID``."""
        if label == DETAIL_MINIMUM_STAY:
            # The older form wrote "Minimum Stay:  night(s)" when the field was blank
            if _STAY_UNIT_ONLY_RE.match(value):
                return None
            match = _MINIMUM_STAY_RE.match(value)
            if not match:
                return _INVALID
            number = float(match.group(1))
            return int(number) if number.is_integer() else number
        if not value:
            return None
        if label == DETAIL_PAYMENT:
            return _split_csv(value) or None
        return value

    def reconcile(self, decoded: DecodedDescription, row: dict[str, Any]) -> dict[str, Any]:
        """Merge decoded values with dedicated columns; a non-empty column wins per field.

        Fields with neither a column value nor a decoded value are left out so
        the draft keeps its defaults.
        """
        embedded = decoded.metadata.model_dump()
        embedded.update(decoded.booking.model_dump())

        merged = {}
        for field in RECONCILED_FIELDS:
            column_value = row.get(field)
            text_value = embedded.get(field)
            if not _is_empty(column_value):
                if not _is_empty(text_value) and text_value != column_value:
                    logger.info(
                        "Dedicated column overrides embedded description value",
                        field=field,
                    )
                merged[field] = column_value
            elif not _is_empty(text_value):
                merged[field] = text_value
        return merged
