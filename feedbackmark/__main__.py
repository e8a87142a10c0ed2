"""feedbackmark CLI entry point.

Allows running via `python -m feedbackmark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys

from . import __version__


def parse_args(args: list[str]) -> dict:
    """Very small argument parser: [--version] [--log-file PATH] [FILE]."""
    options = {"version": False, "log_file": None, "filename": None}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--version", "-V"):
            options["version"] = True
        elif arg == "--log-file":
            if i + 1 >= len(args):
                raise SystemExit("--log-file needs a path")
            options["log_file"] = args[i + 1]
            i += 1
        else:
            options["filename"] = arg
        i += 1
    return options


def main() -> None:
    options = parse_args(sys.argv[1:])
    if options["version"]:
        print(__version__)
        return
    if options["log_file"]:
        # The terminal is in fullscreen mode, so logs can only go to a file
        logging.basicConfig(
            filename=options["log_file"],
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .settings import SettingsStore

    editor = Editor(settings=SettingsStore().load())
    if options["filename"]:
        editor.load_file(options["filename"])
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
