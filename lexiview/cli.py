"""CLI entrypoints for lexiview commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .serializer import serialize_props
from .session import AnalysisSession, generate_props
from .translations import missing_keys, unused_keys


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexiview",
        description="Find translation usages in React sources and synthesize preview props.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan the project and write the analysis cache.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    scan_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore any existing cache and rescan every file.",
    )

    props_parser = subparsers.add_parser(
        "props",
        help="Print mock props synthesized for an interface as JSON.",
    )
    _add_verbose_option(props_parser, suppress_default=True)
    props_parser.add_argument("file", help="Source file the interface is referenced from.")
    props_parser.add_argument("interface", help="Name of the props interface.")

    check_parser = subparsers.add_parser(
        "check",
        help="Report keys missing from, or unused in, each locale catalog.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_path_argument(check_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the analysis and props over HTTP.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_path_argument(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind address (overrides config).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (overrides config).")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lexiview commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "props":
        result = generate_props(Path(args.file), args.interface)
        print(json.dumps(serialize_props(result), indent=2))
        return

    try:
        config = load_config(Path(args.path))
        session = AnalysisSession(config.root, config)
    except (ConfigError, OSError) as exc:
        parser.exit(1, f"lexiview {args.command} failed: {exc}\n")

    if args.command == "scan":
        try:
            snapshot = session.analyze() if args.no_cache else session.load_or_analyze()
            if args.no_cache:
                session.save()
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        print(
            f"{len(snapshot.usages)} translation usages, "
            f"{len(snapshot.key_to_components)} keys, "
            f"{len(snapshot.components)} components"
        )
    elif args.command == "check":
        try:
            snapshot = session.analyze()
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        catalogs = session.load_translations()
        missing = missing_keys(snapshot, catalogs)
        unused = unused_keys(snapshot, catalogs)
        for locale in catalogs:
            print(f"[{locale}] missing: {len(missing[locale])}, unused: {len(unused[locale])}")
            for key in missing[locale]:
                paths = ", ".join(_relativize(Path(p)) for p in snapshot.key_to_components.get(key, []))
                print(f"  - {key}" + (f" ({paths})" if paths else ""))
        if any(missing.values()):
            parser.exit(2)
    elif args.command == "serve":
        from .service import run_service

        run_service(
            session,
            host=args.host or config.service.host,
            port=args.port or config.service.port,
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
