"""vorbiscomment CLI - list, append and write Ogg Vorbis comments."""
import sys
import json
import argparse
import logging
from typing import List, Optional

from . import __version__
from .core import VorbisComment, OperationResult, tool_version
from .errors import ExternalToolError
from .comments import FieldValuesType
from .verify import verify_written
from .utils import (
    Config,
    setup_logging,
    join_for_printing,
    EXIT_CODE_SUCCESS,
    EXIT_CODE_ERROR,
    EXIT_CODE_USAGE,
    EXIT_CODE_NO_FILE,
    EXIT_CODE_PERMISSION,
    EXIT_CODE_INTERRUPTED,
)

logger = logging.getLogger(__name__)

# Exit code per error kind of a failed OperationResult
EXIT_CODES_BY_KIND = {
    'FileNotFound': EXIT_CODE_NO_FILE,
    'FileNotReadable': EXIT_CODE_PERMISSION,
    'EmptyInput': EXIT_CODE_USAGE,
    'MalformedLine': EXIT_CODE_USAGE,
    'ExternalToolError': EXIT_CODE_ERROR,
}

# ---------- CLI & Main ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pyvorbiscomment',
        description="List, append or write Ogg Vorbis comments via the vorbiscomment binary")

    parser.add_argument("file", nargs='?', help="Ogg Vorbis file to inspect or modify")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-l", "--list", dest="mode", action="store_const", const="list",
                      help="List comments (default)")
    mode.add_argument("-a", "--append", dest="mode", action="store_const", const="append",
                      help="Append comments, keeping existing ones")
    mode.add_argument("-w", "--write", dest="mode", action="store_const", const="write",
                      help="Write comments, replacing existing ones")

    parser.add_argument("-t", "--tag", dest="tags", action="append", metavar="NAME=VALUE",
                        help="Comment to append or write (repeatable)")
    parser.add_argument("-c", "--commentfile", dest="comment_file", metavar="PATH",
                        help="Read comments from PATH when appending/writing, export to PATH when listing")
    parser.add_argument("-e", "--escapes", dest="escape", action="store_true",
                        help="Use \\n-style escapes to allow multiline comments")

    # Output
    parser.add_argument("--raw", action="store_true", help="Print listing lines unparsed")
    parser.add_argument("--json", action="store_true", help="Print listing as JSON")
    parser.add_argument("--verify", action="store_true",
                        help="Re-read the file after append/write and check the comments")

    # Tool
    parser.add_argument("--binary", help="Path to the vorbiscomment binary (overrides VORBISCOMMENT_BINARY)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Seconds to wait for the binary (overrides VORBISCOMMENT_TIMEOUT)")
    parser.add_argument("--version", action="store_true",
                        help="Show package and vorbiscomment versions")

    # Logging
    parser.add_argument("--verbose", action='store_true', default=None,
                        help="Enable verbose logging (overrides VORBISCOMMENT_VERBOSE env var)")
    return parser

def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments comprehensively."""
    errors = []

    if args.version:
        return

    if not args.file:
        errors.append("an Ogg Vorbis file is required")

    if args.mode in ('append', 'write'):
        if not args.tags and not args.comment_file:
            errors.append(f"{args.mode} requires --tag or --commentfile")
        if args.tags and args.comment_file:
            errors.append(f"{args.mode} takes either --tag or --commentfile, not both")
        if args.raw or args.json:
            errors.append("--raw and --json only apply to listing")
    else:
        if args.tags:
            errors.append("--tag requires --append or --write")
        if args.verify:
            errors.append("--verify requires --append or --write")
        if args.raw and args.json:
            errors.append("--raw and --json cannot be combined")

    if args.timeout is not None and args.timeout <= 0:
        errors.append("--timeout must be positive")

    if errors:
        raise ValueError("; ".join(errors))

def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.mode = args.mode or 'list'

    # Configuration precedence: CLI flag > environment variable > default
    try:
        Config.load_from_env()
        if args.binary:
            Config.BINARY = args.binary
        if args.timeout is not None:
            Config.TIMEOUT = args.timeout
        Config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_CODE_USAGE)

    # Setup logging - use env var default if flag not explicitly set
    if args.verbose is None:
        args.verbose = Config.DEFAULT_VERBOSE
    setup_logging(args.verbose)

    try:
        validate_args(args)
    except ValueError as e:
        logger.error(f"Argument validation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_CODE_USAGE)

    try:
        if args.version:
            sys.exit(print_versions())
        sys.exit(run_session(args))
    except KeyboardInterrupt:
        sys.exit(EXIT_CODE_INTERRUPTED)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(EXIT_CODE_ERROR)

def print_versions() -> int:
    """Print package and binary versions. Returns exit code."""
    print(f"pyvorbiscomment {__version__}")
    try:
        print(tool_version().rstrip())
    except ExternalToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CODE_ERROR
    return EXIT_CODE_SUCCESS

def exit_code_for(result: OperationResult) -> int:
    if result.ok:
        return EXIT_CODE_SUCCESS
    return EXIT_CODES_BY_KIND.get(result.kind, EXIT_CODE_ERROR)

def run_session(args: argparse.Namespace) -> int:
    """Run one list/append/write against the target file. Returns exit code."""
    vc = VorbisComment(args.file)
    if vc.has_error():
        print(f"Error: {vc.last_error()}", file=sys.stderr)
        return exit_code_for(vc.last_result)

    if args.mode == 'list':
        listing = vc.list(associative=not args.raw, export_path=args.comment_file, escaping=args.escape)
        if args.raw:
            for line in listing:
                print(line)
        elif args.json:
            print(json.dumps(listing, ensure_ascii=False, indent=2))
        else:
            print_comments(listing)
        if vc.has_error():
            print(f"Error: {vc.last_error()}", file=sys.stderr)
        return exit_code_for(vc.last_result)

    comments = args.comment_file or args.tags
    result = vc.apply(comments, args.mode, escaping=args.escape)
    if not result:
        print(f"Error: {result.message}", file=sys.stderr)
        return exit_code_for(result)
    print(f"{args.mode.capitalize()}: OK ({args.file})")

    if args.verify:
        verified = verify_written(args.file, comments, mode=args.mode, escaping=args.escape)
        failed = [name for name, ok in verified.items() if not ok]
        if failed:
            print(f"Verification: FAILED for: {', '.join(failed)}", file=sys.stderr)
            return EXIT_CODE_ERROR
        print("Verification: SUCCESS")
    return EXIT_CODE_SUCCESS

def print_comments(comments: FieldValuesType, max_len: int = 150) -> None:
    """Print a grouped listing, one name per line, truncating long values."""
    if not comments:
        print("  (no comments)")
        return
    for name, values in comments.items():
        s = join_for_printing(values)
        if len(s) > max_len:
            s = s[:max_len-3] + "..."
        print(f"  {name}: {s}")


if __name__ == '__main__':
    main()
