"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
The section ratio table and the late-arrival cutoffs live in config.common.
"""

DEFAULT_SCAN_CODE_PREFIX = "LPRDS-"
DEFAULT_SECURE_CODE_PREFIX = "LPRDS:"
DEFAULT_SECURE_CODE_KEY = "LPRDS_SECURE_KEY_2024"
DEFAULT_SCAN_COOLDOWN_MINUTES = 5
DEFAULT_GROUP_CAPACITY = 15
LEGACY_TOKEN_LENGTH = 5
