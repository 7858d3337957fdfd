"""Configuration loading for git-precommit-checks.

All user-editable settings (rules and display switches) live in a single JSON
file for quick edits without touching Python. Lookup order:
1) an explicit path (``--config``)
2) the GIT_PRECOMMIT_CHECKS_CONFIG environment variable (.env is honored)
3) git-precommit-checks.json in the working directory
4) the "git-precommit-checks" key of package.json

A missing configuration is a valid "no rules" state. A configuration that
exists but cannot be parsed raises ConfigLoadError.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import ChecksConfig, DisplayConfig, RuleSpec
from core.errors import ConfigLoadError

CONFIG_FILENAME = "git-precommit-checks.json"
PACKAGE_JSON_FILENAME = "package.json"
PACKAGE_JSON_KEY = "git-precommit-checks"

CONFIG_ENV = "GIT_PRECOMMIT_CHECKS_CONFIG"
LOG_LEVEL_ENV = "GIT_PRECOMMIT_CHECKS_LOG_LEVEL"

# Display keys keep the camelCase names users already write in package.json.
DISPLAY_KEYS = {
    "offendingContent": "offending_content",
    "rulesSummary": "rules_summary",
    "shortStats": "short_stats",
    "verbose": "verbose",
    "notifications": "notifications",
}


def _read_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(path, f"invalid JSON ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise ConfigLoadError(path, f"not UTF-8 text ({exc})") from exc
    except OSError as exc:
        raise ConfigLoadError(path, str(exc)) from exc


def find_config_path(explicit_path: Optional[str] = None, cwd: Optional[str] = None) -> Optional[str]:
    """Return the configuration file to use, or None when there is none."""

    if explicit_path:
        return explicit_path

    load_dotenv()
    env_path = os.getenv(CONFIG_ENV)
    if env_path:
        return env_path

    base = cwd or os.getcwd()
    candidate = os.path.join(base, CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate

    package_json = os.path.join(base, PACKAGE_JSON_FILENAME)
    if os.path.exists(package_json):
        return package_json
    return None


def _parse_bool(value: Any, key: str, path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigLoadError(path, f'"{key}" must be true or false')
    return value


def _parse_optional_str(entry: dict, key: str, path: str) -> Optional[str]:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigLoadError(path, f'"{key}" must be a string')
    return value


def parse_rule(entry: Any, index: int, path: str) -> RuleSpec:
    """Validate one raw rule entry.

    ``regex`` and ``pattern`` are synonyms; ``blocking`` wins over
    ``nonBlocking`` when both are present.
    """

    if not isinstance(entry, dict):
        raise ConfigLoadError(path, f"rule #{index + 1} must be an object")

    message = entry.get("message")
    if not isinstance(message, str) or not message:
        raise ConfigLoadError(path, f'rule #{index + 1} needs a "message"')

    pattern = _parse_optional_str(entry, "regex", path)
    if pattern is None:
        pattern = _parse_optional_str(entry, "pattern", path)
    if not pattern:
        raise ConfigLoadError(path, f'rule "{message}" needs a "regex"')

    if "blocking" in entry:
        blocking = _parse_bool(entry["blocking"], "blocking", path)
    elif "nonBlocking" in entry:
        blocking = not _parse_bool(entry["nonBlocking"], "nonBlocking", path)
    else:
        blocking = True

    return RuleSpec(
        message=message,
        pattern=pattern,
        filter=_parse_optional_str(entry, "filter", path),
        blocking=blocking,
    )


def parse_display(raw: Any, path: str) -> DisplayConfig:
    if raw is None:
        return DisplayConfig()
    if not isinstance(raw, dict):
        raise ConfigLoadError(path, '"display" must be an object')

    values = {}
    for key, field_name in DISPLAY_KEYS.items():
        if key in raw:
            values[field_name] = _parse_bool(raw[key], key, path)
    return DisplayConfig(**values)


def parse_config(raw: Any, path: str) -> Optional[ChecksConfig]:
    """Build a ChecksConfig from decoded JSON, or None if it holds no rules."""

    if not isinstance(raw, dict):
        raise ConfigLoadError(path, "the configuration root must be an object")

    rules = raw.get("rules")
    if rules is None:
        return None
    if not isinstance(rules, list):
        raise ConfigLoadError(path, '"rules" must be a list')

    return ChecksConfig(
        rules=tuple(parse_rule(entry, index, path) for index, entry in enumerate(rules)),
        display=parse_display(raw.get("display"), path),
        source_path=path,
    )


def load_config(explicit_path: Optional[str] = None, cwd: Optional[str] = None) -> Optional[ChecksConfig]:
    """Locate and load the configuration; None means nothing is configured."""

    path = find_config_path(explicit_path, cwd)
    if path is None:
        return None

    if os.path.basename(path) == PACKAGE_JSON_FILENAME:
        package = _read_json(path)
        if not isinstance(package, dict):
            raise ConfigLoadError(path, "package.json root must be an object")
        section = package.get(PACKAGE_JSON_KEY)
        if section is None:
            return None
        return parse_config(section, path)

    if not os.path.exists(path):
        raise ConfigLoadError(path, "file not found")
    return parse_config(_read_json(path), path)


def log_level_override() -> Optional[str]:
    """Return the log level requested through the environment, if any."""

    load_dotenv()
    value = os.getenv(LOG_LEVEL_ENV)
    return value.upper() if value else None
