"""Allow ``python -m fitps``."""

import sys

from fitps.cli import cli_main


def main() -> int:
    """Run the CLI and turn however it exits into a status code."""
    try:
        cli_main()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except KeyboardInterrupt:
        return 130  # SIGINT
    return 0


if __name__ == "__main__":
    sys.exit(main())
