"""Environment-driven configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ENV_FILES: tuple[str, ...] = (".env.naumachia", ".env.naumachia.local")


def parse_env_text(text: str) -> dict[str, str]:
    """Parse KEY=VALUE lines, skipping blanks, comments and malformed lines."""
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        values[key] = value
    return values


def load_env_file(path: str | Path, *, override_existing: bool = True) -> dict[str, str]:
    """Apply an env file to the process environment; missing files are ignored.

    Returns the pairs that were applied.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return {}
    applied: dict[str, str] = {}
    for key, value in parse_env_text(env_path.read_text(encoding="utf-8")).items():
        if override_existing or key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str | Path] | None = None
) -> None:
    """Load env files left to right so later files win."""
    for path in paths if paths is not None else DEFAULT_ENV_FILES:
        load_env_file(path, override_existing=override_existing)


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Runtime knobs for one game process."""

    opponent_delay_seconds: float = 1.0
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GameSettings:
        env = os.environ if environ is None else environ
        return cls(
            opponent_delay_seconds=_read_delay(env, "NAUMACHIA_OPPONENT_DELAY", 1.0),
            seed=_read_optional_int(env, "NAUMACHIA_SEED"),
            log_level=(
                env.get("NAUMACHIA_LOG_LEVEL", "").strip() or env.get("LOG_LEVEL", "INFO")
            ).upper(),
        )


def _read_delay(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}.") from exc
    if value < 0.0:
        raise ValueError(f"{name} must be >= 0, got {raw!r}.")
    return value


def _read_optional_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
