import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..core.config import DEFAULT_TYPES, build_config
from ..core.errors import EnumerationError, ValidationError
from ..core.io_utils import SUPPORTED_EXTS, list_operations
from ..core.resize_service import run_batch

EXIT_OK = 0
EXIT_COMMAND_ERROR = 1
EXIT_VALIDATION_ERROR = 2

log = logging.getLogger("image_resizer")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    log.setLevel(level)
    for h in list(log.handlers):
        log.removeHandler(h)
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    log.addHandler(ch)


class _Parser(argparse.ArgumentParser):
    # usage errors are command errors, not validation errors
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_COMMAND_ERROR, f"{self.prog}: error: {message}\n")


def _positive_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {v!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    supported = ", ".join(sorted(e.lstrip(".") for e in SUPPORTED_EXTS))
    p = _Parser(prog="image-resizer", description="Tool for resizing images en masse")
    p.add_argument("-i", "--input-dir", required=True,
                   help="Location of the image directory")
    p.add_argument("-o", "--output-dir", required=True,
                   help="Location of the output directory. Created if it does not exist")
    p.add_argument("-r", "--recursive", action="store_true",
                   help="Find and resize images from subfolders too")
    p.add_argument("-t", "--type", dest="file_types", default=DEFAULT_TYPES,
                   help=f"Image file type(s) separated by commas. Supported file types are {supported}")
    p.add_argument("-R", "--resolution", required=True,
                   help="Target image resolution in <width>x<height> format (e.g. 1920x1080)")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="Print the reason for every failed operation")
    p.add_argument("-w", "--workers", type=_positive_int, default=None,
                   help="Number of parallel workers (default: CPU count)")
    p.add_argument("--no-progress", action="store_true",
                   help="Do not draw the progress bar")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def run(args: argparse.Namespace) -> int:
    try:
        config = build_config(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            resolution=args.resolution,
            file_types=args.file_types,
            recursive=args.recursive,
            verbose=args.verbose,
            workers=args.workers,
        )
        ops = list_operations(config)
    except (ValidationError, EnumerationError) as e:
        log.error("%s", e)
        return EXIT_VALIDATION_ERROR

    if not ops:
        print("No files found")
        return EXIT_OK

    log.info("Resizing %d image(s) to %s using %d worker(s)", len(ops), config.resolution, config.workers)
    summary, errors, _ = run_batch(ops, workers=config.workers, show_progress=not args.no_progress)

    # bar is closed; safe to write diagnostics now
    errors.report(verbose=config.verbose)
    log.info("Done. Success: %d, Errors: %d. Output: %s (%.1fs)",
             summary.succeeded, summary.failed, config.output_dir, summary.elapsed)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_COMMAND_ERROR

    configure_logging(args.verbose)
    try:
        return run(args)
    except Exception:
        log.exception("Unexpected error")
        return EXIT_COMMAND_ERROR


if __name__ == "__main__":
    sys.exit(main())
