"""Error handling utilities."""

from typing import Optional


class ListingWizardError(Exception):
    """Base exception for the listing wizard backend."""
    pass


class UnknownFieldError(ListingWizardError):
    """Field path is not part of the property schema."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unknown field: {path}")


class FieldTypeError(ListingWizardError):
    """Value does not match the kind declared for a field."""

    def __init__(self, path: str, expected: str, value: object):
        self.path = path
        self.expected = expected
        self.value = value
        super().__init__(f"Field {path} expects {expected}, got {type(value).__name__}: {value!r}")


class DerivationConfigError(ListingWizardError):
    """Derivation rules would chain into each other."""
    pass


class SubmitNotAllowedError(ListingWizardError):
    """Submit called before the review step."""
    pass


class RecordNotFoundError(ListingWizardError):
    """Property record requested for editing does not exist."""
    pass


class PersistenceError(ListingWizardError):
    """Record store operation failed."""
    pass


class SupabaseError(PersistenceError):
    """Supabase operation error."""
    pass


class CodecParseWarning(UserWarning):
    """A description section was recognised but its payload could not be parsed."""

    def __init__(self, section: str, reason: str, line_number: Optional[int] = None):
        self.section = section
        self.reason = reason
        self.line_number = line_number
        super().__init__(f"{section}: {reason}")

    def to_dict(self) -> dict:
        return {
            "section": self.section,
            "reason": self.reason,
            "line_number": self.line_number,
        }
