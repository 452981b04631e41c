"""Retailer selector table.

Maps a retailer identifier to the CSS selector that is only present (and
visible) on that retailer's product page while the item can be bought.
"""

import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

DATA_DIR = Path(__file__).resolve().parent / "data"
RETAILERS_PATH = DATA_DIR / "retailers.json"


@lru_cache(maxsize=None)
def load_retailers(path: Path = RETAILERS_PATH) -> Mapping[str, str]:
    """Read the bundled table once; the result is read-only."""
    table = json.loads(Path(path).read_text(encoding="utf-8"))
    return MappingProxyType({str(k).lower(): str(v) for k, v in table.items()})


def selector_for(retailer: str, retailers: Optional[Mapping[str, str]] = None) -> Optional[str]:
    table = load_retailers() if retailers is None else retailers
    return table.get((retailer or "").strip().lower())


def normalize_retailer(value: str, retailers: Mapping[str, str]) -> str:
    """Lower-case a retailer id and check it against the table.

    Raises ValueError listing the known ids when the value is not one of them.
    """
    key = (value or "").strip().lower()
    if key not in retailers:
        raise ValueError("Retailer must be one of: " + ", ".join(retailers.keys()))
    return key
