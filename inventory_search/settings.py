import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_cutoffs(raw: str) -> list[tuple[float, str]]:
    """
    Parses "50:Critical,25:High" into [(50.0, "Critical"), (25.0, "High")],
    highest bound first.
    """
    cutoffs = []
    for chunk in raw.split(","):
        if not chunk.strip():
            continue
        bound, _, label = chunk.partition(":")
        cutoffs.append((float(bound), label.strip()))
    return sorted(cutoffs, key=lambda pair: pair[0], reverse=True)


# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
SNAPSHOT_FILENAME = os.getenv("SNAPSHOT_FILENAME", "inventory.json")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Search ---
# A document matches when its score is strictly above this value.
MATCH_THRESHOLD = int(os.getenv("MATCH_THRESHOLD", "0"))

# Group score at or above which every item of the group is kept.
STRONG_MATCH_SCORE = int(os.getenv("STRONG_MATCH_SCORE", "80"))

# "strong_group_match" or "any_group_match"
ITEM_INCLUSION_POLICY = os.getenv("ITEM_INCLUSION_POLICY", "strong_group_match")

# Also search the stringified quantity and cost of items.
SEARCH_NUMERIC_FIELDS = _get_bool("SEARCH_NUMERIC_FIELDS", False)

# --- Stock Alerts ---
SEVERITY_CUTOFFS = _parse_cutoffs(os.getenv("SEVERITY_CUTOFFS", "50:Critical,25:High"))
DEFAULT_SEVERITY = os.getenv("DEFAULT_SEVERITY", "Warning")

# Label used for items that sit directly inside a root group.
MAIN_GROUP_LABEL = "Main Group"
