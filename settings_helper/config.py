"""Central configuration constants for the settings helper."""

import os

LOGGER_NAME = "settings_helper"
LOG_LEVEL = os.environ.get("SETTINGS_HELPER_LOG_LEVEL", "INFO").upper()

# One of UNKNOWN_FIELD_POLICIES; "ignore" reproduces the legacy silent no-op.
UNKNOWN_FIELD_POLICY = os.environ.get("SETTINGS_HELPER_UNKNOWN_FIELD_POLICY", "warn").lower()
UNKNOWN_FIELD_POLICIES = ("ignore", "warn", "error")

TEXT_INPUT_CLASS = "regular-text"
TEXTAREA_ROWS = 5
TEXTAREA_COLS = 60

PAGE_NONE_LABEL = "Choose a page"
PAGE_NONE_VALUE = "-1"

FORM_ACTION_URL = os.environ.get("SETTINGS_HELPER_FORM_ACTION", "options.php")
SUBMIT_LABEL = "Save Changes"
NONCE_FIELD_NAME = "_settings_nonce"

SETTINGS_FILE_VERSION = 1
