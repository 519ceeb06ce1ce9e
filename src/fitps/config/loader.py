"""Configuration loading and validation for fitps.

This module provides:
- Pydantic models for configuration validation
- YAML config file discovery and loading
- Environment variable expansion in config values
- Merging of config file with defaults
- Clear, user-friendly error messages for config issues
"""

from difflib import get_close_matches
import os
from pathlib import Path
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from fitps.config.defaults import DEFAULT_CONFIG


class ConfigError(Exception):
    """Base exception for configuration errors.

    Attributes:
        message: The main error message
        file_path: Path to the config file (if applicable)
        line_number: Line number where the error occurred (if known)
        suggestion: Helpful suggestion for fixing the error
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: str | None = None,
        line_number: int | None = None,
        column: int | None = None,
        suggestion: str | None = None,
        context_lines: list[str] | None = None,
    ) -> None:
        self.message = message
        self.file_path = file_path
        self.line_number = line_number
        self.column = column
        self.suggestion = suggestion
        self.context_lines = context_lines
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.file_path:
            location = f"Error in {self.file_path}"
            if self.line_number:
                location += f" line {self.line_number}"
            parts.append(location + ":")
        else:
            parts.append("Configuration error:")

        parts.append(f"  {self.message}")

        if self.context_lines and self.column:
            parts.append("")
            for line in self.context_lines:
                parts.append(f"    {line}")
            parts.append(" " * (self.column + 3) + "^")

        if self.suggestion:
            parts.append("")
            parts.append(f"  Suggestion: {self.suggestion}")

        return "\n".join(parts)


class ConfigSyntaxError(ConfigError):
    """Error for YAML syntax issues."""

    pass


class ConfigValidationError(ConfigError):
    """Error for configuration value validation failures."""

    pass


VALID_TOP_LEVEL_KEYS = {
    "default_width",
    "detail_reserve",
    "ps_command",
    "highlight",
    "logging",
}

VALID_LOGGING_KEYS = {
    "enabled",
    "level",
    "file",
}

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def _suggest_key(unknown_key: str, valid_keys: set[str]) -> str | None:
    matches = get_close_matches(unknown_key, list(valid_keys), n=1, cutoff=0.6)
    if matches:
        return f"Did you mean '{matches[0]}'?"
    return None


def _describe(value: Any) -> str:
    """Get a human-readable type description for a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, str):
        return f'string "{value}"'
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _format_pydantic_error(
    error: ValidationError,
    config_data: dict[str, Any],
    file_path: str | None = None,
) -> ConfigValidationError:
    """Convert a Pydantic ValidationError to a ConfigValidationError.

    Only the first reported problem is described.
    """
    errors = error.errors()
    if not errors:
        return ConfigValidationError("Configuration validation failed", file_path=file_path)

    first = errors[0]
    loc = first.get("loc", ())
    error_type = first.get("type", "")
    ctx = first.get("ctx", {})
    path = ".".join(str(part) for part in loc)

    actual: Any = config_data
    for key in loc:
        if isinstance(actual, dict):
            actual = actual.get(key)
        else:
            break

    suggestion = None
    if error_type == "literal_error":
        message = f"Invalid value for '{path}': got {_describe(actual)}"
        suggestion = f"Expected one of: {ctx.get('expected', '')}"
    elif error_type in ("greater_than_equal", "less_than_equal"):
        limit = ctx.get("ge", ctx.get("le"))
        message = f"Value for '{path}' is out of range: {actual}"
        if error_type == "greater_than_equal":
            suggestion = f"Value must be at least {limit}"
        else:
            suggestion = f"Value must be at most {limit}"
    elif error_type in ("int_parsing", "int_type", "int_from_float"):
        message = f"Invalid number for '{path}': got {_describe(actual)}"
        suggestion = "Please provide a whole number"
    elif error_type in ("bool_type", "bool_parsing"):
        message = f"Expected boolean for '{path}': got {_describe(actual)}"
        suggestion = "Use 'true' or 'false'"
    elif error_type == "string_type":
        message = f"Expected string for '{path}': got {_describe(actual)}"
    elif error_type == "extra_forbidden":
        unknown_key = str(loc[-1]) if loc else "unknown"
        message = f"Unknown configuration key '{path}'"
        if len(loc) > 1 and loc[0] == "logging":
            suggestion = _suggest_key(unknown_key, VALID_LOGGING_KEYS)
        else:
            suggestion = _suggest_key(unknown_key, VALID_TOP_LEVEL_KEYS)
        if not suggestion:
            suggestion = "Valid keys are: " + ", ".join(sorted(VALID_TOP_LEVEL_KEYS))
    else:
        message = f"Invalid value for '{path}': {first.get('msg', 'Invalid value')}"

    return ConfigValidationError(message, file_path=file_path, suggestion=suggestion)


def _format_yaml_error(
    error: yaml.YAMLError,
    file_path: str | None = None,
    content: str | None = None,
) -> ConfigSyntaxError:
    """Convert a YAML error to a ConfigSyntaxError with position and context."""
    line_number = None
    column = None
    context_lines = None
    suggestion = None

    mark = getattr(error, "problem_mark", None)
    if mark is not None:
        line_number = mark.line + 1
        column = mark.column + 1
        if content:
            lines = content.splitlines()
            if 0 <= mark.line < len(lines):
                context_lines = [lines[mark.line]]

    error_str = str(error).lower()
    if "could not find expected ':'" in error_str:
        suggestion = "Check for missing colons after keys (e.g., 'key: value')"
    elif "found character" in error_str and "tab" in error_str:
        suggestion = "Use spaces instead of tabs for indentation"
    elif "mapping values are not allowed" in error_str:
        suggestion = "Check your indentation - make sure nested keys are properly indented"

    message = "Invalid YAML syntax"
    problem = getattr(error, "problem", None)
    if problem:
        message = f"YAML syntax error: {problem}"

    return ConfigSyntaxError(
        message,
        file_path=file_path,
        line_number=line_number,
        column=column,
        context_lines=context_lines,
        suggestion=suggestion,
    )


def expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in config values.

    Unset variables without a default are left as written.
    """
    if isinstance(value, str):

        def replace_env_var(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            if match.group(2) is not None:
                return match.group(2)
            return match.group(0)

        return ENV_VAR_PATTERN.sub(replace_env_var, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str = "~/.fitps/fitps.log"


class Config(BaseModel):
    """Main configuration model for fitps.

    Loaded from YAML and overridden by CLI flags.
    """

    model_config = ConfigDict(extra="forbid")

    default_width: int = Field(default=80, ge=1, le=10000)
    detail_reserve: int = Field(default=44, ge=0, le=10000)
    ps_command: str = Field(default="ps", min_length=1)
    highlight: bool = True
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_config_path(custom_path: str | None = None) -> Path | None:
    """Determine the configuration file path.

    Checks locations in this order:
    1. Custom path (if provided via --config flag)
    2. FITPS_CONFIG_PATH environment variable
    3. ~/.config/fitps/config.yaml (XDG standard)
    4. ~/.fitps/config.yaml (legacy location)

    Raises:
        FileNotFoundError: If a custom path was given and does not exist
    """
    if custom_path:
        path = Path(custom_path).expanduser()
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {custom_path}")

    env_path = os.environ.get("FITPS_CONFIG_PATH")
    if env_path:
        path = Path(env_path).expanduser()
        if path.exists():
            return path
        return None

    xdg_path = Path.home() / ".config" / "fitps" / "config.yaml"
    if xdg_path.exists():
        return xdg_path

    legacy_path = Path.home() / ".fitps" / "config.yaml"
    if legacy_path.exists():
        return legacy_path

    return None


def load_config(config_path: str | None = None) -> Config:
    """Load and validate configuration.

    The config file, if one is found, is merged over the defaults.

    Args:
        config_path: Optional custom config file path

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If custom config path doesn't exist
        ConfigSyntaxError: If config file has invalid YAML syntax
        ConfigValidationError: If config values are invalid
    """
    config_data = DEFAULT_CONFIG.copy()
    resolved_path: Path | None = None

    path = get_config_path(config_path)
    if path:
        resolved_path = path
        content = path.read_text()
        try:
            file_config = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise _format_yaml_error(e, str(path), content) from e
        if not isinstance(file_config, dict):
            raise ConfigValidationError(
                f"Expected a mapping at the top level, got {_describe(file_config)}",
                file_path=str(path),
            )
        config_data = deep_merge(config_data, file_config)

    config_data = expand_env_vars(config_data)

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise _format_pydantic_error(
            e,
            config_data,
            str(resolved_path) if resolved_path else None,
        ) from e
