"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Dict

from .channel import BASE_URL_ENV, CHANNEL_ENV, resolve_channel
from .config import DEFAULT_MANIFEST, load_config
from .errors import DocsiteError
from .git.vendor import DocsVendor
from .logging import configure_logging
from .manifest import write_manifest
from .pipeline import SiteResolver


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only print warnings and errors.",
    )


def _add_channel_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory containing .docsite.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--channel",
        help=f"Release channel to build (overrides ${CHANNEL_ENV}).",
    )
    parser.add_argument(
        "--base-url",
        help=f"Absolute base path for the site (overrides ${BASE_URL_ENV}).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Resolve channels, sources, versions and routes of a documentation site.",
    )
    _add_verbosity_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve the site and write the route manifest.",
    )
    _add_verbosity_options(resolve_parser, suppress_default=True)
    _add_channel_options(resolve_parser)
    resolve_parser.add_argument(
        "-o",
        "--output",
        help=f"Manifest destination (defaults to the config 'output' or {DEFAULT_MANIFEST}).",
    )

    check_parser = subparsers.add_parser(
        "check-links",
        help="Resolve the site and report link integrity without writing output.",
    )
    _add_verbosity_options(check_parser, suppress_default=True)
    _add_channel_options(check_parser)

    vendor_parser = subparsers.add_parser(
        "vendor",
        help="Refresh vendored documentation from upstream repositories.",
    )
    _add_verbosity_options(vendor_parser, suppress_default=True)
    _add_channel_options(vendor_parser)
    vendor_parser.add_argument(
        "--only",
        action="append",
        metavar="NAMESPACE",
        help="Limit the refresh to the given source (repeatable).",
    )

    return parser


def _environment(args: argparse.Namespace) -> Dict[str, str]:
    environ = dict(os.environ)
    if getattr(args, "channel", None):
        environ[CHANNEL_ENV] = args.channel
    if getattr(args, "base_url", None):
        environ[BASE_URL_ENV] = args.base_url
    return environ


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))
    environ = _environment(args)

    if args.command == "resolve":
        try:
            build = SiteResolver().resolve(args.path, environ)
            output = Path(args.output) if args.output else build.config.output
            if output is None:
                output = build.config.root / DEFAULT_MANIFEST
            written = write_manifest(build, output)
        except (DocsiteError, OSError) as exc:
            parser.exit(1, f"docsite resolve failed: {exc}\n")
        print(
            f"Resolved {len(build.routes)} routes and {len(build.pages)} pages "
            f"for channel '{build.channel.name}' -> {_relativize(written)}"
        )
    elif args.command == "check-links":
        try:
            build = SiteResolver().resolve(args.path, environ)
        except (DocsiteError, OSError) as exc:
            parser.exit(1, f"docsite check-links failed: {exc}\n")
        report = build.links
        if report is not None:
            print(
                f"{report.total} links checked: {report.resolved} resolved, "
                f"{len(report.broken_paths)} broken paths, "
                f"{len(report.broken_anchors)} broken anchors"
            )
    elif args.command == "vendor":
        try:
            config = load_config(Path(args.path))
            channel = resolve_channel(environ, config.channels)
            results = DocsVendor().sync_all(config, channel, only=args.only)
        except (DocsiteError, OSError) as exc:
            parser.exit(1, f"docsite vendor failed: {exc}\n")
        if not results:
            print("No vendored sources configured")
        for result in results:
            print(f"{result.namespace}: {result.repo}@{result.branch} -> {_relativize(result.destination)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
