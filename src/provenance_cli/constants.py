"""Application-wide constants for provenance-cli.

Constants shared between the codecs, the core resolver/extractor, and the CLI.
For user-configurable settings, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "CONFIG_DIR",
    "CONFIG_FILE_NAME",
    "CONFIG_ENV_VAR",
    "LOG_FILE_NAME",
    # UR encoding
    "UR_SCHEME",
    # Reserved names
    "PROVENANCE_PREDICATE",
    "PROVENANCE_UR_TYPE",
    # CBOR tags
    "TAG_DATE",
    "TAG_ENVELOPE",
    "TAG_LEAF",
    "TAG_KNOWN_VALUE",
    "TAG_ENCRYPTED",
    "TAG_COMPRESSED",
    "TAG_PROVENANCE_MARK",
    # Envelope digests
    "DIGEST_LENGTH",
    # Chain directories
    "MARKS_SUBDIR",
    "MARK_FILE_GLOB",
]

import os

from platformdirs import user_config_dir

# ============================================================================
# Application Identity
# ============================================================================

APP_NAME: str = "provenance-cli"

# Config directory (platform-specific):
# - macOS: ~/Library/Application Support/provenance-cli/
# - Linux: ~/.config/provenance-cli/
# - Windows: %APPDATA%\provenance-cli\
CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))

CONFIG_FILE_NAME: str = "config.json"

# Overrides the default config path when --config is not given
CONFIG_ENV_VAR: str = "PROVENANCE_CLI_CONFIG"

LOG_FILE_NAME: str = "provenance-cli.jsonl"

# ============================================================================
# UR Encoding
# ============================================================================

UR_SCHEME: str = "ur:"

# ============================================================================
# Reserved Names
# ============================================================================

# Shared with the mark library; matched exactly (case-sensitive)
PROVENANCE_PREDICATE: str = "provenance"
PROVENANCE_UR_TYPE: str = "provenance"

# ============================================================================
# CBOR Tags
# ============================================================================

TAG_DATE: int = 1
TAG_ENVELOPE: int = 200
TAG_LEAF: int = 201
TAG_KNOWN_VALUE: int = 40000
TAG_ENCRYPTED: int = 40002
TAG_COMPRESSED: int = 40003
TAG_PROVENANCE_MARK: int = 1347571542

# SHA-256 digest carried by an elided envelope
DIGEST_LENGTH: int = 32

# ============================================================================
# Chain Directories
# ============================================================================

# Mark files live in <chain>/marks/mark-<seq>.json
MARKS_SUBDIR: str = "marks"
MARK_FILE_GLOB: str = "*.json"
