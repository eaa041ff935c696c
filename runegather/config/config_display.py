# runegather/config/config_display.py
"""
Text formatting tags and colours used by every message the engine produces.
"""

# --- Text Formatting Tags ---
# Inline tags are replaced with colours by whatever renders the text.
FORMAT_TITLE = "[[TITLE]]"       # Yellow, for headings
FORMAT_CATEGORY = "[[CAT]]"      # Cyan, for categories and labels
FORMAT_HIGHLIGHT = "[[HI]]"      # Green, for important information
FORMAT_SUCCESS = "[[OK]]"        # Green, for success messages
FORMAT_ERROR = "[[ERR]]"         # Red, for error messages
FORMAT_GRAY = "[[GRAY]]"         # Gray, for hints and undiscovered entries
FORMAT_BLUE = "[[BLUE]]"
FORMAT_PURPLE = "[[PURPLE]]"
FORMAT_PINK = "[[PINK]]"
FORMAT_ORANGE = "[[ORANGE]]"
FORMAT_RESET = "[[/]]"           # Reset to default text color

TEXT_COLOR = (255, 255, 255)

DEFAULT_COLORS = {
    FORMAT_TITLE: (255, 255, 0),
    FORMAT_CATEGORY: (0, 255, 255),
    FORMAT_HIGHLIGHT: (0, 255, 0),
    FORMAT_SUCCESS: (0, 255, 0),
    FORMAT_ERROR: (255, 0, 0),
    FORMAT_GRAY: (150, 150, 150),
    FORMAT_BLUE: (90, 140, 255),
    FORMAT_PURPLE: (190, 100, 255),
    FORMAT_PINK: (255, 110, 200),
    FORMAT_ORANGE: (255, 165, 0),
    FORMAT_RESET: TEXT_COLOR,
}

# --- Rarity Display ---
RARITY_FORMATS = {
    "common": FORMAT_HIGHLIGHT,
    "uncommon": FORMAT_BLUE,
    "rare": FORMAT_PURPLE,
    "epic": FORMAT_PINK,
    "legendary": FORMAT_ORANGE,
}

RARITY_LABELS = {
    "common": "Common",
    "uncommon": "Uncommon",
    "rare": "Rare",
    "epic": "Epic",
    "legendary": "Legendary",
}
