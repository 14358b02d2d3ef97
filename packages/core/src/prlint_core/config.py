import os
import re
from pathlib import Path
from typing import Optional

import yaml

from prlint_core.models import TitlePolicy

# GraphQL ReportedContentClassifiers values accepted by minimizeComment.
MINIMIZE_REASONS = ("SPAM", "ABUSE", "OFF_TOPIC", "OUTDATED", "DUPLICATE", "RESOLVED")
MINIMIZE_SCOPES = ("all", "reviews", "comments")

DEFAULT_CONFIG: dict = {
    "repo-token": None,
    "title-regex": None,
    "on-failed-regex-fail-action": "false",
    "on-failed-regex-create-review": "true",
    "on-failed-regex-request-changes": "false",
    "on-failed-regex-comment": "This is just an example. Failed regex: `%regex%`!",
    "on-succeeded-regex-dismiss-review-comment": "All good!",
    "on-succeeded-regex-minimize-comment": "true",
    "on-minimize-comment-reason": "RESOLVED",
    "minimize-scope": "all",
    "bot-login": "github-actions[bot]",
}

_TRUE = {"true", "yes", "y", "on", "1"}
_FALSE = {"false", "no", "n", "off", "0", ""}


class ConfigError(ValueError):
    """Raised when the inputs can't be turned into a TitlePolicy."""


def input_env_name(name: str) -> str:
    """Environment variable the Actions runner uses for input ``name``."""
    return "INPUT_" + name.replace(" ", "_").upper()


def load_config(config_path: str = ".prlint.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prlint.yml in the current directory (keys are input names)
      3. Action inputs from INPUT_* environment variables
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping of input names to values.")
        for key, value in file_config.items():
            # YAML turns `true` into a bool; inputs are strings on the runner.
            config[key] = str(value).lower() if isinstance(value, bool) else value

    for key in DEFAULT_CONFIG:
        value = os.environ.get(input_env_name(key))
        # The runner sets every declared input, using "" for ones left blank.
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def parse_bool(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value if value is not None else "").strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Input {name!r} must be a boolean (true/false), got {value!r}.")


def build_policy(config: dict) -> TitlePolicy:
    """Validate the merged configuration and compile it into a TitlePolicy."""
    source = config.get("title-regex")
    if not source:
        raise ConfigError("Input required and not supplied: title-regex")
    try:
        pattern = re.compile(source)
    except re.error as e:
        raise ConfigError(f"Invalid title-regex {source!r}: {e}") from e

    reason = str(config.get("on-minimize-comment-reason") or "RESOLVED").strip().upper()
    if reason not in MINIMIZE_REASONS:
        raise ConfigError(f"on-minimize-comment-reason must be one of {', '.join(MINIMIZE_REASONS)}, got {reason!r}.")

    scope = str(config.get("minimize-scope") or "all").strip().lower()
    if scope not in MINIMIZE_SCOPES:
        raise ConfigError(f"minimize-scope must be one of {', '.join(MINIMIZE_SCOPES)}, got {scope!r}.")

    return TitlePolicy(
        pattern=pattern,
        failure_comment=config.get("on-failed-regex-comment") or "",
        fail_action=parse_bool("on-failed-regex-fail-action", config.get("on-failed-regex-fail-action")),
        create_review=parse_bool("on-failed-regex-create-review", config.get("on-failed-regex-create-review")),
        request_changes=parse_bool("on-failed-regex-request-changes", config.get("on-failed-regex-request-changes")),
        dismiss_comment=config.get("on-succeeded-regex-dismiss-review-comment") or "",
        minimize_on_success=parse_bool(
            "on-succeeded-regex-minimize-comment", config.get("on-succeeded-regex-minimize-comment")
        ),
        minimize_reason=reason,
        minimize_scope=scope,
        bot_login=config.get("bot-login") or DEFAULT_CONFIG["bot-login"],
    )
