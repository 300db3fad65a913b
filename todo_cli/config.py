# PURPOSE: read the CLI settings from a local INI file (default: task.ini).
#
#   [task]
#   apikey = <key from /v1/users/register>
#   host = http://localhost:3000

import configparser
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_FILE = "task.ini"
DEFAULT_HOST = "http://localhost:3000"
SECTION = "task"


class CliConfigError(Exception):
    """The INI file is missing, unreadable or has no API key."""


@dataclass(frozen=True)
class CliConfig:
    api_key: str
    host: str = DEFAULT_HOST


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> CliConfig:
    path = Path(path)
    if not path.is_file():
        raise CliConfigError(f"Config file {path} not found")

    text = path.read_text(encoding="utf-8")
    parser = configparser.ConfigParser()
    try:
        # A bare "apikey = ..." line without a section header is accepted too
        if not text.lstrip().startswith("["):
            text = f"[{SECTION}]\n{text}"
        parser.read_string(text, source=str(path))
    except configparser.Error as exc:
        raise CliConfigError(f"Can't parse {path}: {exc}") from exc

    section = parser[SECTION] if parser.has_section(SECTION) else parser[parser.default_section]
    api_key = section.get("apikey", "").strip()
    if not api_key:
        raise CliConfigError(f"No apikey found in {path}")
    host = section.get("host", DEFAULT_HOST).strip().rstrip("/") or DEFAULT_HOST
    return CliConfig(api_key=api_key, host=host)
