"""Environment mode selection for pd-uploader.

The mode decides which hash ledger a run reads and appends to, so that test
runs never mark content as sent in the production ledger. This is the only
place the ``ENV_MODE`` variable is consulted; the ledger itself always
receives a resolved path.
"""
import os
from pathlib import Path
from typing import Optional

from .config import UploaderConfig
from .constants import ENV_MODE_VAR

TEST_MODE = "test"
PROD_MODE = "prod"


def resolve_mode(cli_mode: Optional[str] = None) -> str:
    """Resolve the environment mode.

    Resolution order: CLI override > ENV_MODE variable > production.

    Args:
        cli_mode: Override from CLI (e.g., --env test)

    Returns:
        "test" or "prod"
    """
    mode = cli_mode or os.environ.get(ENV_MODE_VAR, "")
    return TEST_MODE if mode.strip().lower() == TEST_MODE else PROD_MODE


def resolve_ledger_path(config: UploaderConfig, mode: Optional[str] = None) -> Path:
    """Pick the ledger file for the given mode.

    Args:
        config: Uploader configuration holding both ledger locations
        mode: Explicit mode; falls back to ``resolve_mode()``

    Returns:
        Ledger path for this run
    """
    if resolve_mode(mode) == TEST_MODE:
        return Path(config.test_ledger_path)
    return Path(config.ledger_path)
