from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ConfigurationError

API_URL_KEY = "KARAKEEP_API_URL"
API_KEY_KEY = "KARAKEEP_API_KEY"
EXPECTED_API_SUFFIX = "/api/v1"


@dataclass
class EnvConfig:
    '''Expected variables in .env file'''

    api_url: Optional[str] = None
    api_key: Optional[str] = None


@dataclass
class ImportConfig:
    '''Connection settings for one import run'''

    api_base_url: str
    api_key: str

    def __post_init__(self) -> None:
        self.api_base_url = normalize_base_url(self.api_base_url or "")
        self.api_key = (self.api_key or "").strip()

    @classmethod
    def from_values(cls, api_base_url: Optional[str], api_key: Optional[str]) -> "ImportConfig":
        return cls(api_base_url=api_base_url or "", api_key=api_key or "")

    @property
    def has_expected_suffix(self) -> bool:
        return self.api_base_url.endswith(EXPECTED_API_SUFFIX)


def normalize_base_url(raw_url: str) -> str:
    """Trim whitespace and drop a trailing slash from the API base URL."""

    cleaned = raw_url.strip()
    if cleaned.endswith("/"):
        cleaned = cleaned[:-1]
    return cleaned


def _parse_env_lines(lines: List[str]) -> Dict[str, str]:
    raw: Dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        raw[key.strip()] = value.strip().strip('"').strip("'")
    return raw


def load_env_file(path: Path) -> EnvConfig:
    """Parse the provided .env file and return a structured EnvConfig.

    A missing file is not an error: the values may come from the command line
    instead, and the run itself checks that both ended up non-empty.
    """

    if not path.exists():
        return EnvConfig()

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Could not read {path}: {exc}") from exc

    raw = _parse_env_lines(text.splitlines())
    return EnvConfig(
        api_url=raw.get(API_URL_KEY) or None
        ,api_key=raw.get(API_KEY_KEY) or None
    )


def save_env_file(path: Path, config: ImportConfig) -> None:
    """Persist the URL and key into the .env file, keeping any unrelated lines."""

    updates = {API_URL_KEY: config.api_base_url, API_KEY_KEY: config.api_key}
    lines: List[str] = []
    if path.exists():
        lines = path.read_text(encoding="utf-8").splitlines()

    written = set()
    output: List[str] = []
    for line in lines:
        stripped = line.strip()
        key = stripped.split("=", 1)[0].strip() if "=" in stripped and not stripped.startswith("#") else None
        if key in updates:
            output.append(f"{key}={updates[key]}")
            written.add(key)
        else:
            output.append(line)

    for key, value in updates.items():
        if key not in written:
            output.append(f"{key}={value}")

    try:
        path.write_text("\n".join(output) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Could not write {path}: {exc}") from exc
