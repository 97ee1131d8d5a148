"""Environment-driven settings and logging setup for scopedcalc.

Settings are read from SCOPEDCALC_* variables. CLI flags override them.
Self-contained: only os.environ plus rich for the log handler.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler

ENV_PREFIX = "SCOPEDCALC_"
DEFAULT_BUFFER_SIZE = 100
DEFAULT_LOG_LEVEL = "WARNING"


def _env_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    # None means no limit beyond what the interpreter can satisfy
    max_slots: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Settings:
        """Build settings from the environment (os.environ by default).

        Raises ValueError naming the variable when a value does not parse.
        """
        env = os.environ if env is None else env
        raw_level = env.get(ENV_PREFIX + "LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL
        return cls(
            buffer_size=_env_int(env, "BUFFER_SIZE", DEFAULT_BUFFER_SIZE),
            max_slots=_env_int(env, "MAX_SLOTS", None),
            log_level=parse_log_level(raw_level, f"{ENV_PREFIX}LOG_LEVEL"),
        )


def parse_log_level(name: str, source: str = "log level") -> str:
    """Normalize a logging level name. Raises ValueError naming `source`."""
    level = name.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{source} is not a logging level: {level!r}")
    return level


def setup_logging(level: str = DEFAULT_LOG_LEVEL, console: Optional[Console] = None) -> None:
    """Route the scopedcalc logger through a RichHandler on stderr. Idempotent."""
    logger = logging.getLogger("scopedcalc")
    logger.setLevel(level)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
