"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"

# Database
DATABASE_URL = os.getenv("MAPCRAFT_DATABASE_URL", f"sqlite:///{DATA_DIR / 'mapcraft.db'}")
SQL_ECHO = os.getenv("MAPCRAFT_SQL_ECHO", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("MAPCRAFT_LOG_LEVEL", "WARNING").upper()

# Inventory: AT_OR_BELOW flags a material once available <= threshold,
# BELOW only once available < threshold.
LOW_STOCK_POLICY = os.getenv("MAPCRAFT_LOW_STOCK_POLICY", "AT_OR_BELOW").upper()
