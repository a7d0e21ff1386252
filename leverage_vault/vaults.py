from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from leverage_vault.config import get_settings
from leverage_vault.models import VaultEntry

logger = logging.getLogger(__name__)

BUNDLED_VAULTS = Path(__file__).parent / "data" / "vaults.json"


def load_vaults(path: str | Path | None = None) -> Tuple[VaultEntry, ...]:
    """Read the vault registry from a JSON list of vault objects."""
    source = Path(path) if path else BUNDLED_VAULTS
    raw = json.loads(source.read_text(encoding="utf-8"))
    vaults = tuple(VaultEntry.model_validate(v) for v in raw)
    logger.info(f"Loaded {len(vaults)} leverage vaults from {source}")
    return vaults


@lru_cache(maxsize=1)
def get_vaults() -> Tuple[VaultEntry, ...]:
    return load_vaults(get_settings().VAULTS_FILE)


def vaults_for_market(vaults: List[VaultEntry] | Tuple[VaultEntry, ...], market: str) -> List[VaultEntry]:
    return [v for v in vaults if v.market == market]
