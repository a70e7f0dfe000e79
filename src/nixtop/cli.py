"""Command line entry point for nixtop."""

import argparse
import logging
import sys
from pathlib import Path

from nixtop import __version__
from nixtop.accounts import list_build_accounts
from nixtop.display import Display, FrameSource
from nixtop.frame import build_frame
from nixtop.models import BACKENDS, Settings
from nixtop.monitor import LISTERS, ProcessSampler
from nixtop.resolver import OutputPathResolver

logger = logging.getLogger(__name__)


def non_negative_float(value: str) -> float:
    """Parse a delay in seconds, rejecting negative values."""
    delay = float(value)
    if delay < 0:
        raise argparse.ArgumentTypeError(f"delay must not be negative: {value}")
    return delay


def build_parser() -> argparse.ArgumentParser:
    """Build the nixtop argument parser."""
    parser = argparse.ArgumentParser(prog="nixtop", description="Monitor Nix build processes")
    parser.add_argument(
        "-d", "--delay", type=non_negative_float, default=0.25,
        help="delay between updates in seconds (default 0.25)",
    )
    parser.add_argument("-1", "--once", action="store_true", help="run only once and exit")
    parser.add_argument("--iterations", type=int, help="run for N updates then exit")
    parser.add_argument("--backend", choices=BACKENDS, default="psutil", help="process listing backend")
    parser.add_argument("--group", default="nixbld", help="group whose members run builds")
    parser.add_argument("--tmp-root", type=Path, default=Path("/tmp"), help="where build directories are created")
    parser.add_argument("--tui", action="store_true", help="use the interactive Textual viewer")
    parser.add_argument("--log-file", type=Path, help="write diagnostics to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: Path | None, verbose: bool) -> None:
    """Send log records to ``log_file``, or only warnings to stderr when there is none."""
    # The dashboard owns the terminal, so only warnings reach stderr
    if log_file is None:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Collect parsed arguments into Settings."""
    return Settings(
        group_name=args.group,
        tmp_root=args.tmp_root,
        delay=args.delay,
        backend=args.backend,
    )


def make_frame_source(settings: Settings) -> FrameSource:
    """Bind the sampling pipeline for ``settings`` into a zero-argument frame builder."""
    resolver = OutputPathResolver(tmp_root=settings.tmp_root, env_file_name=settings.env_file_name)
    sampler = ProcessSampler(resolver, LISTERS[settings.backend])

    def frame_source() -> list[str]:
        accounts = list_build_accounts(settings.group_name)
        return build_frame(sampler.sample(accounts))

    return frame_source


def main(argv: list[str] | None = None) -> int:
    """Entry point for nixtop."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)
    settings = settings_from_args(args)
    frame_source = make_frame_source(settings)

    if args.tui:
        from nixtop.app import NixTopApp

        NixTopApp(frame_source, delay=settings.delay).run()
        return 0

    display = Display(frame_source)
    try:
        display.run(once=args.once, delay=settings.delay, iterations=args.iterations)
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        logger.error("terminal unavailable: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
