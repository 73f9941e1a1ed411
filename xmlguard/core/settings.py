import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_list(name: str, default):
    value = os.environ.get(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


# ==============================================================================
# PROJECT PATHS
# ==============================================================================
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Directories
DATA_DIR = Path(os.environ.get("XMLGUARD_DATA_DIR", BASE_DIR / "xmlxsddata"))
LOGS_DIR = Path(os.environ.get("XMLGUARD_LOGS_DIR", BASE_DIR / "validation_logs"))

# Report files written by --output when no path is given
ERROR_REPORT_FILE = LOGS_DIR / "validation_errors.txt"
JSON_REPORT_FILE = LOGS_DIR / "validation_report.json"
MARKDOWN_REPORT_FILE = LOGS_DIR / "validation_report.md"
REPORT_FILES = {
    "text": ERROR_REPORT_FILE,
    "json": JSON_REPORT_FILE,
    "markdown": MARKDOWN_REPORT_FILE,
}

# File extensions picked up when a directory is validated
XML_EXTENSION = ".xml"
XSD_EXTENSION = ".xsd"

# ==============================================================================
# SCHEMA CACHE
# ==============================================================================
# Parsed schemas expire after one hour
CACHE_TTL_SECONDS = _env_int("XMLGUARD_CACHE_TTL", 60 * 60)

# ==============================================================================
# SEVERITY LEVELS (libxml2 convention)
# ==============================================================================
LEVEL_WARNING = 1
LEVEL_ERROR = 2
LEVEL_FATAL = 3

LEVEL_NAMES = {
    LEVEL_WARNING: "warning",
    LEVEL_ERROR: "error",
    LEVEL_FATAL: "fatal",
}

# ==============================================================================
# CUSTOM RULES
# ==============================================================================
# <title> text must be strictly longer than this
TITLE_MIN_LENGTH = _env_int("XMLGUARD_TITLE_MIN_LENGTH", 10)

# Text content above this length produces a warning (0 disables the rule)
MAX_CONTENT_LENGTH = _env_int("XMLGUARD_MAX_CONTENT_LENGTH", 0)

PROHIBITED_ELEMENTS = _env_list("XMLGUARD_PROHIBITED_ELEMENTS", [])
PROHIBITED_ATTRIBUTES = _env_list("XMLGUARD_PROHIBITED_ATTRIBUTES", [])

# ==============================================================================
# REPORTING
# ==============================================================================
UNKNOWN_LOCATION = "unknownLocation"
REPORT_FORMATS = ("json", "text", "markdown")
DEFAULT_REPORT_FORMAT = os.environ.get("XMLGUARD_REPORT_FORMAT", "text")

# ==============================================================================
# RUNTIME
# ==============================================================================
DEFAULT_WORKERS = _env_int("XMLGUARD_WORKERS", 1)

LOG_LEVEL = os.environ.get("XMLGUARD_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
