# runegather/config/config_gathering.py
"""
Timings, caps and policies for the gathering minigame.
"""

# --- Accumulation Run ---
GATHER_TICK_INTERVAL_MS = 100
GATHER_PROGRESS_STEP = 3
GATHER_MAX_PROGRESS = 100

# --- Element Reveal ---
# Delay before each element of a known combination appears in the selection.
ELEMENT_REVEAL_DELAY_MS = 200

# --- Auto-Gathering ---
AUTO_GATHER_MAX_RESOURCES = 3
AUTO_GATHER_RESOURCE_DELAY_MS = 500
AUTO_GATHER_CYCLE_DELAY_MS = 500

# What happens to the current resource when its discovery call fails:
#   "skip"  - drop it for this cycle and move on (no count increment)
#   "retry" - run the same resource again after the inter-resource delay
#   "halt"  - stop auto-gathering altogether
AUTO_GATHER_FAILURE_POLICIES = ("skip", "retry", "halt")
AUTO_GATHER_FAILURE_POLICY = "skip"

# --- Catalog ---
RESOURCE_RARITIES = ("common", "uncommon", "rare", "epic", "legendary")
DEFAULT_RARITY = "common"
