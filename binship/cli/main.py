# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for binship.

Every operation is a subcommand of `binship`. The global options (--config,
--project-dir, --log-level) are inherited by every subcommand through
argparse's parent parser mechanism.

Usage:
    binship build
    binship check
    binship bump minor
    binship publish patch --dry-run
    binship publish 1.2.3 --tag beta --no-build
    binship info
"""

import argparse
import sys
from typing import Optional, Sequence

from binship.cli.commands import (
    handle_build,
    handle_bump,
    handle_check,
    handle_info,
    handle_publish,
)
from binship.cli.exit_codes import SUCCESS

_VERSION_HELP = "patch | minor | major, or an explicit version such as 1.2.3"

_PUBLISH_EPILOG = """\
examples:
  binship publish patch
  binship publish minor --dry-run
  binship publish 1.2.3 --tag beta
"""


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so that help text doesn't collide between the parent and
    the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: <project-dir>/binship.yaml if present).",
    )
    parent.add_argument(
        "--project-dir",
        type=str,
        default=None,
        dest="project_dir",
        help="Project root holding package.json, bin/ and packages/ (default: cwd).",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (default: from config, else INFO).",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    commands = [
        ("build", "Cross-compile all targets and regenerate platform packages.", handle_build),
        ("check", "Check version consistency across all manifests.", handle_check),
        ("info", "Show the target catalog and the host's target.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    bump_parser = subparsers.add_parser(
        "bump",
        parents=[parent],
        help="Set a new version in the primary and existing platform manifests.",
    )
    bump_parser.add_argument("version", help=_VERSION_HELP)
    bump_parser.set_defaults(func=handle_bump)

    publish_parser = subparsers.add_parser(
        "publish",
        parents=[parent],
        help="Bump the version, rebuild, and publish every package.",
        epilog=_PUBLISH_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    publish_parser.add_argument("version", nargs="?", default=None, help=_VERSION_HELP)
    publish_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Pass --dry-run to the registry client; nothing is really published.",
    )
    publish_parser.add_argument(
        "--tag",
        type=str,
        default="latest",
        help="Distribution tag to publish under (default: latest).",
    )
    publish_parser.add_argument(
        "--no-build",
        action="store_true",
        default=False,
        dest="no_build",
        help="Skip the build step and publish the existing packages as-is.",
    )
    publish_parser.set_defaults(func=handle_publish, parser=publish_parser)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main CLI entrypoint, referenced by pyproject.toml's [project.scripts].

    With no subcommand, prints usage and exits with SUCCESS.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="binship",
        description="binship: build, package and publish platform-specific binary packages.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args(argv)

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(SUCCESS)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
