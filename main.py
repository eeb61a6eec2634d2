# file: main.py
"""Entry point: run the command line analysis."""
from __future__ import annotations

import sys
import traceback

from cli import main as run_cli


def main() -> None:
    try:
        sys.exit(run_cli())
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as exc:
        traceback.print_exc()
        print(f"Fatal error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
