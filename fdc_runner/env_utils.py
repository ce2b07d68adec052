from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from .constants import (
    DA_LAYER_API_KEY_ENV,
    PLACEHOLDER_MARKERS,
    PRIVATE_KEY_ENV,
    RPC_URL_ENV,
)

# Map canonical env names to alternative aliases used by older deployment scripts
ENV_ALIASES: Dict[str, list[str]] = {
    RPC_URL_ENV: ["RPC_URL", "FLARE_MAINNET_RPC_URL"],
    DA_LAYER_API_KEY_ENV: ["X_API_KEY", "FDC_API_KEY"],
    PRIVATE_KEY_ENV: ["DEPLOYER_PRIVATE_KEY"],
}


def build_environment(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> Dict[str, str]:
    """Return the merged environment used to build a configuration.

    Values from ``env_file`` (default ``.env`` in the working directory) only
    fill keys that are not already set; ``env`` defaults to ``os.environ``.
    """

    merged: Dict[str, str] = {}
    path = env_file if env_file is not None else Path.cwd() / ".env"
    if path.exists():
        for key, value in dotenv_values(path).items():
            if value is not None:
                merged[key] = value
    merged.update(dict(os.environ if env is None else env))
    return merged


def is_placeholder(value: str) -> bool:
    upper_value = value.upper()
    return any(marker in upper_value for marker in PLACEHOLDER_MARKERS)


def resolve_env_value(name: str, env: Mapping[str, str]) -> Optional[str]:
    """Return the first usable value for ``name`` or one of its aliases."""

    for key in [name, *ENV_ALIASES.get(name, [])]:
        value = (env.get(key) or "").strip()
        if value and not is_placeholder(value):
            return value
    return None
