from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = PROJECT_ROOT / "matches"

STORAGE_KEY = "padelMatch"
SCHEMA_VERSION = "1.0"
EXPORT_PREFIX = "padel"

ROSTER_SIZE = 4

# Team index -> player indices
TEAMS = ((0, 1), (2, 3))

# Points per stat kind, keyed by wire value
STAT_VALUES = {
    "winners": 2,
    "unforced_errors": -1,
}
