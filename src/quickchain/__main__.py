"""CLI entry point: run `quickchain file.rs` or `python -m quickchain file.rs`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import ExpansionDriver
    from .codegen.printer import render
    from .codegen.sexpr import dump_items, dump_tokens
    from .utils.config import DEFAULT_FIELD_TYPE, DEFAULT_TARGET_PATH
    from .utils.io_utils import STDIN_PATH, read_source_file

    parser = argparse.ArgumentParser(
        prog="quickchain",
        description="Expand quick!() error entries into an error_chain! invocation.",
    )
    parser.add_argument("file", help="Path to the error_chain body to expand ('-' for stdin)")
    parser.add_argument("--pretty", action="store_true", help="Indent the expanded output")
    parser.add_argument("--dump-tree", action="store_true", help="Print the output token tree as an S-expression")
    parser.add_argument("--dump-items", action="store_true", help="Print the rewritten items as an S-expression")
    parser.add_argument("--target", default=DEFAULT_TARGET_PATH, help=f"Macro to invoke (default: {DEFAULT_TARGET_PATH})")
    parser.add_argument("--field-type", default=DEFAULT_FIELD_TYPE, help=f"Type of quick! fields (default: {DEFAULT_FIELD_TYPE})")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug)")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(name)s: %(levelname)s: %(message)s",
        )

    if args.file == STDIN_PATH:
        source_file = "<stdin>"
    else:
        path = Path(args.file).resolve()
        if not path.exists():
            sys.stderr.write(f"quickchain: error: file not found: {path}\n")
            return 1
        if not path.is_file():
            sys.stderr.write(f"quickchain: error: not a file: {path}\n")
            return 1
        source_file = str(path)

    try:
        source = read_source_file(args.file)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"quickchain: error: could not read file: {e}\n")
        return 1

    driver = ExpansionDriver(target_path=args.target, field_type=args.field_type)
    result = driver.expand_source(source, source_file)

    if not result.success:
        result.reporter.print_errors()
        return 1

    logging.getLogger("quickchain").info(
        "expanded %d quick! entr(ies), %d canonical entr(ies) in total",
        result.stats.expanded, result.stats.canonical,
    )

    if args.dump_items:
        print(dump_items(result.items))
    if args.dump_tree:
        print(dump_tokens(result.tokens))
    if not (args.dump_items or args.dump_tree):
        print(render(result.tokens, pretty=args.pretty))
    return 0


if __name__ == "__main__":
    sys.exit(main())
