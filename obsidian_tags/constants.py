"""Module-level constants for the Obsidian tag manager."""

import os
from pathlib import Path

# Configuration
CONFIG_PATH = Path(os.environ.get("OBSIDIAN_TAGS_CONFIG", Path(__file__).parent.parent / "vaults.yaml"))

# Frontmatter
FRONTMATTER_DELIMITER = "---"
TAGS_FIELD = "tags"

# Inline tag reports
CONTEXT_RADIUS = 40

# Logging
LOG_LEVEL = "INFO"
