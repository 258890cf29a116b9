"""Repository-local settings."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from gbo.reporter import SORT_KEYS
from gbo.ui import DEFAULT_CHART_WIDTH


class SettingsError(Exception):
    """Settings file is invalid."""


@dataclass(frozen=True)
class Settings:
    """Defaults applied when the command line does not override them."""

    base_revision: str = "HEAD"
    remotes: tuple[str, ...] = ()
    chart_width: int = DEFAULT_CHART_WIDTH
    sort: str = "date"


def settings_path(repo: Path) -> Path:
    return repo / ".gbo" / "settings.json"


def _load_raw(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SettingsError(f"Invalid JSON in {path}") from exc
    except OSError as exc:
        raise SettingsError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    if not isinstance(raw, dict):
        raise SettingsError(f"Invalid settings format in {path}")
    return cast(dict[str, object], raw)


def _expect_str(value: object, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Invalid {key} in settings: expected a non-empty string.")
    return value.strip()


def _expect_str_list(value: object, key: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise SettingsError(f"Invalid {key} in settings: expected a list of strings.")
    return tuple(_expect_str(item, key) for item in value)


def _expect_positive_int(value: object, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SettingsError(f"Invalid {key} in settings: expected a positive integer.")
    return value


def load_settings(repo: Path) -> Settings:
    """Load settings from <repo>/.gbo/settings.json, falling back to defaults."""
    raw = _load_raw(settings_path(repo))
    defaults = Settings()

    sort = defaults.sort
    if "sort" in raw:
        sort = _expect_str(raw["sort"], "sort")
        if sort not in SORT_KEYS:
            raise SettingsError(f"Invalid sort in settings: expected one of {', '.join(SORT_KEYS)}.")

    return Settings(
        base_revision=(
            _expect_str(raw["base_revision"], "base_revision")
            if "base_revision" in raw
            else defaults.base_revision
        ),
        remotes=_expect_str_list(raw["remotes"], "remotes") if "remotes" in raw else defaults.remotes,
        chart_width=(
            _expect_positive_int(raw["chart_width"], "chart_width")
            if "chart_width" in raw
            else defaults.chart_width
        ),
        sort=sort,
    )
