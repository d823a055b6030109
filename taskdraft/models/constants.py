"""Constants for taskdraft.

This module centralizes all magic numbers and default values used throughout the application.
"""

# Oracle defaults (overridable through environment, see integrations.openai_client)
DEFAULT_ORACLE_MODEL = "gpt-4o-mini"
DEFAULT_ORACLE_TIMEOUT_SEC = 10.0
ORACLE_TEMPERATURE = 0.3
ORACLE_MAX_TOKENS = 400

# Priority arbitration
PRIORITY_CONFIDENCE_THRESHOLD = 0.6
URGENT_WINDOW_HOURS = 24
HIGH_WINDOW_DAYS = 7

# Time of day applied to resolved dates without an explicit clock time
DEFAULT_HOUR = 9
MORNING_HOUR = 9
NOON_HOUR = 12
AFTERNOON_HOUR = 15
EVENING_HOUR = 18

# Local fallback extractor
FALLBACK_TITLE_TOKENS = 4
FALLBACK_TITLE = "Task"

# Field limits
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000

DEFAULT_LANGUAGE = "en"

# Characters of a malformed oracle answer quoted in warnings
LOG_EXCERPT_LENGTH = 100
