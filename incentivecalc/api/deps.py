"""IncentiveEngine dependency for the API routers.

All requests share one engine, built from the config file handed to
create_app(). The policy file named by that config is read when the
engine is first requested, not per request.
"""

from __future__ import annotations

import functools
from pathlib import Path

from incentivecalc.core import IncentiveEngine

_config_path: Path = Path("incentivecalc.yaml")


def set_config_path(path: str | Path) -> None:
    """Switch the API to another incentivecalc.yaml.

    Any engine built from the previous file is discarded, so its
    policies are reloaded on the next request.

    Args:
        path: Path to the config file.
    """
    global _config_path  # noqa: PLW0603
    _config_path = Path(path)
    get_engine.cache_clear()


@functools.lru_cache(maxsize=1)
def get_engine() -> IncentiveEngine:
    """Return the engine that prices and validates API requests.

    Raises:
        FileNotFoundError: If the config or its policy file is missing.
    """
    return IncentiveEngine(_config_path)
