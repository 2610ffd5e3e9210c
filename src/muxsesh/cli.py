"""CLI entry point for mux-sesh.

Launches the picker by default, with a few JSON subcommands for scripting.

All muxsesh.* imports are lazy (inside functions) so that ``mux-sesh --help``
and argument parsing stay fast.

Workflow:
    mux-sesh                 # pick a session (default)
    mux-sesh sessions        # list live tmux sessions
    mux-sesh projects        # list candidate project directories
    mux-sesh config --show   # print the effective configuration
"""

from __future__ import annotations

import argparse
import json
import logging
import sys


def _json_out(obj) -> None:
    """Print JSON to stdout."""
    json.dump(obj, sys.stdout, indent=2)
    print()


def _entry_to_dict(entry) -> dict:
    data = {
        "title": entry.title,
        "kind": entry.kind.value,
        "target": entry.target,
    }
    if entry.is_session:
        data["attached"] = entry.attached
        data["windows"] = entry.window_count
    else:
        data["description"] = entry.description
    return data


def setup_logging(verbose: bool = False) -> None:
    """Log to a file; the terminal belongs to the TUI and to tmux."""
    from muxsesh.paths import LOG_FILE

    handlers: list[logging.Handler] = []
    try:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(LOG_FILE))
    except OSError:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def cmd_sessions(args: argparse.Namespace) -> None:
    """List live tmux sessions."""
    from muxsesh.providers.sessions import SessionProvider

    _json_out([_entry_to_dict(e) for e in SessionProvider().list_entries()])


def cmd_projects(args: argparse.Namespace) -> None:
    """List candidate project directories from the configured roots."""
    from muxsesh.config import load_config
    from muxsesh.providers.projects import ProjectProvider

    config = load_config()
    provider = ProjectProvider(config.project_roots(), config.search_depth)
    _json_out([_entry_to_dict(e) for e in provider.list_entries()])


def cmd_config(args: argparse.Namespace) -> None:
    """Print the config file path, or the effective configuration."""
    from dataclasses import asdict

    from muxsesh.config import CONFIG_FILE, load_config

    if args.show:
        _json_out(asdict(load_config()))
    else:
        print(CONFIG_FILE)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="mux-sesh",
        description="Pick, create and manage tmux sessions.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Write debug logs (tmux and git commands) to the log file",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser(
        "sessions",
        help="List live tmux sessions as JSON",
    )
    sub.add_parser(
        "projects",
        help="List candidate project directories as JSON",
    )
    p_config = sub.add_parser(
        "config",
        help="Show the configuration file",
        description=(
            "Print the path of the configuration file. The file is created "
            "with defaults on first use."
        ),
    )
    p_config.add_argument(
        "--show",
        action="store_true",
        help="Print the effective configuration as JSON instead",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    if args.command is None:
        # No subcommand: launch the TUI
        from muxsesh.app import tui_main
        tui_main()
    elif args.command == "sessions":
        cmd_sessions(args)
    elif args.command == "projects":
        cmd_projects(args)
    elif args.command == "config":
        cmd_config(args)


if __name__ == "__main__":
    main()
