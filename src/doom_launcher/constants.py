"""Shared constants for the launcher.

Directive tokens here are only defaults; Settings can override them.
"""

# --- Menu directives ---

# Typed at any prompt to open the mutator menu
MUTATOR_MENU_TOKEN = "mut"

# Typed at any prompt to pick an entry at random
RANDOM_TOKEN = "rnd"

# Minimum rapidfuzz score (0-100) for a code to be offered as a suggestion
FUZZY_SCORE_THRESHOLD = 80

CONSOLE_PROMPT = "> "


# --- Settings file ---

SETTINGS_VERSION = 2
SETTINGS_VERSION_HEADER = f"v{SETTINGS_VERSION}"
DEFAULT_SETTINGS_FILE = "DoomSettings.json"
DEFAULT_HISTORY_FILE = "DoomHistory.txt"

# Category assigned to v1 entries that carry none
UNKNOWN_CATEGORY = "Unknown"

# Placeholder category written into a freshly created settings file
PLACEHOLDER_CATEGORY = "CategoryName"


# --- Exit codes ---

EXIT_CONFIG_NOT_FOUND = -1
EXIT_CONFIG_PARSE_FAILURE = -2
EXIT_LAUNCH_FAILED = 1
