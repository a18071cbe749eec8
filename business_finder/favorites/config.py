from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FavoritesConfig:
    """
    Where favorites are stored.

    Each client gets its own directory under ``storage_dir``; the favorites
    list lives in the ``slot`` key inside it.
    """

    storage_dir: Path = Path(os.getenv("FAVORITES_DIR", ".favorites"))
    slot: str = "favoriteBusinesses"

    def client_dir(self, client_id: str) -> Path:
        return self.storage_dir / client_id


DEFAULT_FAVORITES_CONFIG = FavoritesConfig()
