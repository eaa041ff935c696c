# runegather/config/config_game.py
"""
Configuration for file paths, the frame loop and the journal.
"""
import os

# --- Directories and Files ---
# config_game.py is in runegather/config/, so we go up two levels to get to root.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.path.join(BASE_DIR, "data")
ELEMENTS_FILE = "elements.json"
RESOURCES_FILE = "resources.json"

DEFAULT_CHARACTER_ID = "1"

# --- Frame Loop ---
TARGET_FPS = 30
MAX_FRAME_MS = 100  # A stalled frame never advances the clock by more than this

# --- Journal ---
JOURNAL_MAX_ENTRIES = 100
JOURNAL_ENTRY_TYPES = ("system", "item", "error")

# --- Help ---
HELP_MAX_COMMANDS_PER_CATEGORY = 6
