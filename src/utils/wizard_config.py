"""Wizard configuration read from environment variables."""

import os


class WizardConfig:
    """Centralized wizard configuration."""

    PROPERTIES_TABLE = os.environ.get("PROPERTIES_TABLE", "properties")
    DEFAULT_COUNTRY = os.environ.get("DEFAULT_COUNTRY", "India")
    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "INR")
    NEW_PROPERTY_STATUS = os.environ.get("NEW_PROPERTY_STATUS", "pending")


# Fixed business rules
MIN_DESCRIPTION_LENGTH = 50
MIN_DAILY_RATE = 500
