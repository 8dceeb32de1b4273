"""CLI entrypoints for sourcepage commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import (
    COLLISION_ERROR,
    COLLISION_SKIP,
    ConfigError,
    SourcePageConfig,
    check_output_paths,
    load_config,
)
from .logging import configure_logging
from .naming import ArtifactCollisionError
from .orchestrator import Orchestrator
from .walker import resolve_root


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sourcepage",
        description="Render a project tree into HTML artifacts plus a navigation index.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Generate artifacts for every file in a project.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    build_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory receiving the per-file artifacts.",
    )
    build_parser.add_argument(
        "--init-script",
        type=Path,
        help="File receiving the navigation tree initialization script.",
    )
    build_parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        help="Maximum number of filesystem operations in flight.",
    )
    build_parser.add_argument(
        "--prune",
        action="append",
        default=[],
        metavar="NAME",
        help="Additional directory name to skip (repeatable).",
    )
    build_parser.add_argument(
        "--collisions",
        choices=[COLLISION_SKIP, COLLISION_ERROR],
        help="How to handle two files flattening to the same artifact name.",
    )

    return parser


def _apply_overrides(config: SourcePageConfig, args: argparse.Namespace) -> SourcePageConfig:
    if args.output_dir is not None:
        config.output.data_dir = args.output_dir.expanduser().resolve()
    if args.init_script is not None:
        config.output.init_script = args.init_script.expanduser().resolve()
    if args.max_concurrency is not None:
        config.max_concurrency = args.max_concurrency
    if args.prune:
        config.walk.prune_dirs = [*config.walk.prune_dirs, *args.prune]
    if args.collisions is not None:
        config.naming.collisions = args.collisions
    check_output_paths(config)
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for sourcepage commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "build":
        try:
            root = resolve_root(args.path)
            config = _apply_overrides(load_config(root), args)
            summary = Orchestrator(config=config).run(root)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, ArtifactCollisionError) as exc:
            parser.exit(1, f"sourcepage build failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"sourcepage build failed: {exc}\nRun with --verbose for more details.\n")
        print(
            f"Generated {summary.succeeded} artifacts ({summary.failed} failed) "
            f"in {_relativize(Path(summary.output_dir))}"
        )
        if not summary.tree_written:
            print(f"Navigation tree could not be written to {summary.init_script}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
