"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
storage keys, domain constants, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory holding one JSON file per storage key
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "WARNING")

# Storage keys
TRANSACTIONS_KEY = "financeplus_transactions"
BUDGETS_KEY = "financeplus_budgets"
CATEGORIES_KEY = "financeplus_categories"
USER_KEY = "financeplus_user"
PIN_KEY = "financeplus_pin"
AUTH_KEY = "financeplus_auth"

SYSTEM_USER_ID = "system"
WITHDRAWAL_CATEGORY = "Retrait Épargne"

APP_NAME = "Pat Finances"
APP_VERSION = "1.0.0"

PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 6

LOCAL_USER = {
    "id": "local-user",
    "email": "local@financeplus.xof",
    "name": "Utilisateur Principal",
}

# (name, type) pairs seeded as system categories on first use
DEFAULT_CATEGORIES = [
    ("Alimentation", "DEPENSE"),
    ("Transport", "DEPENSE"),
    ("Loisirs", "DEPENSE"),
    ("Loyer", "DEPENSE"),
    ("Santé", "DEPENSE"),
    ("Éducation", "DEPENSE"),
    ("Shopping", "DEPENSE"),
    ("Abonnements", "DEPENSE"),
    ("Salaire", "GAIN"),
    ("Business", "GAIN"),
    ("Investissement", "EPARGNE"),
    ("Épargne de secours", "EPARGNE"),
]

MONTHS = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]


def ensure_data_directories(data_dir: Optional[Path] = None) -> None:
    """Create all required data directories if they don't exist."""
    base = Path(data_dir) if data_dir else DATA_DIR
    for directory in [base, base / "backups"]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic log handler for command line use."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
