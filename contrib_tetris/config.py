"""Runtime settings. Environment is read here and nowhere else."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .schedule import POLICIES, RUNS


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    username: str
    token: Optional[str] = None
    out_svg: str = "output/tetris.svg"
    out_gif: Optional[str] = None
    runs: int = RUNS
    weeks: int = 53
    policy: str = "pack"


def load_settings(env: Mapping[str, str] = os.environ, **overrides) -> Settings:
    """Merge environment variables with non-None keyword overrides."""
    values = {
        "username": env.get("GITHUB_USERNAME") or env.get("USERNAME"),
        "token": env.get("GITHUB_TOKEN") or None,
        "out_svg": env.get("TETRIS_OUT") or Settings.out_svg,
        "out_gif": env.get("TETRIS_GIF") or None,
        "runs": env.get("TETRIS_RUNS") or RUNS,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    if not values["username"]:
        raise ConfigError("Missing GITHUB_USERNAME")
    try:
        values["runs"] = int(values["runs"])
    except ValueError:
        raise ConfigError(f"TETRIS_RUNS must be an integer, got {values['runs']!r}") from None
    if values["runs"] < 1:
        raise ConfigError("runs must be at least 1")
    if not 1 <= int(values.get("weeks", 53)) <= 53:
        raise ConfigError("weeks must be within 1..53")
    if values.get("policy", "pack") not in POLICIES:
        raise ConfigError(f"policy must be one of {POLICIES}")
    return Settings(**values)
