"""Entry point for ``python -m trafficlens`` and the ``trafficlens`` console script.

Examples:
  trafficlens --proxy-port 1080

  python -m trafficlens --proxy-port 7890 --interval 3000 --count 3 --format json
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from trafficlens import __version__, configure_logging
from trafficlens import glogger


def _print_startup_banner() -> None:
    startup_rows = [
        ["version", __version__],
        ["python", sys.version.split()[0]],
        ["platform", sys.platform],
    ]

    level = os.environ.get("LOGURU_LEVEL")
    if level:
        startup_rows.append(["LOGURU_LEVEL", level])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "trafficlens starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point — configure logging, then hand over to the monitor CLI."""
    configure_logging()
    _print_startup_banner()

    from trafficlens.cli import main as cli_main

    cli_main(sys.argv[1:])


if __name__ == "__main__":
    main()
