"""Default configuration values for fitps.

This module defines the configuration used when no config file exists or when
a value is not specified. All configuration options are documented here.

Environment Variables:
    FITPS_CONFIG_PATH: Override default config file path
    Any config value can reference environment variables using ${VAR} syntax

Config File Locations (in order of precedence):
    1. Path specified via --config CLI flag
    2. Path specified via FITPS_CONFIG_PATH environment variable
    3. ~/.config/fitps/config.yaml (XDG default)
    4. ~/.fitps/config.yaml (legacy location)
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "default_width": 80,  # Width used when the terminal size is unknown
    "detail_reserve": 44,  # Args column reserve for -d
    "ps_command": "ps",  # Program invoked to list processes
    "highlight": True,  # Show matched rows in bold red
    # Logging configuration (for debugging)
    "logging": {
        "enabled": False,
        "level": "INFO",  # DEBUG, INFO, WARNING, ERROR
        "file": "~/.fitps/fitps.log",
    },
}
