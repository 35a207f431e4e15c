"""
minipas CLI Entrypoint.

This module provides the command-line interface for analyzing minipas programs.

Features:
    - Read source from `.pas` files or inline strings.
    - Re-parse a token ledger (`.dyd`) produced by an earlier run.
    - Lex and parse, then write the token, cleaned-token, variable, procedure
      and error ledgers.
    - Optionally print the error ledger.

Example usage:
    minipas input/source.pas
    minipas -s "begin integer a; a := 1; end" --print
    minipas program.pas -o build --verbose
    minipas output/source.dyd --from-tokens

Exit status:
    0 when analysis found no errors, 1 when it did, 2 when the input or the
    configuration could not be read.

Functions:
    run_minipas(source, is_string=False, from_tokens=False, config=None, print_errors=False) -> int:
        Executes the full pipeline (read → lex → parse → write ledgers).

    main(argv=None) -> int:
        Parses CLI arguments, configures logging and invokes `run_minipas`.
"""

import argparse
import logging
import sys

from minipas.minipas_config import CompilerConfig
from minipas.minipas_errors import ConfigError
from minipas.minipas_ledger import format_error, parse_token_ledger, write_ledgers
from minipas.minipas_pipeline import analyze, analyze_tokens

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_USAGE = 2


def run_minipas(
    source: str,
    is_string: bool = False,
    from_tokens: bool = False,
    config: CompilerConfig | None = None,
    print_errors: bool = False,
) -> int:
    """
    Run the minipas front end and write its ledgers.

    Args:
        source (str): Program text, or path to a source file or token ledger.
        is_string (bool): If True, treats `source` as raw text instead of a path.
        from_tokens (bool): If True, `source` is a token ledger and lexing is skipped.
        config (CompilerConfig | None): Output locations and limits. Defaults to `CompilerConfig()`.
        print_errors (bool): If True, prints the error ledger to stdout.

    Returns:
        int: `EXIT_OK` if the program is free of errors, `EXIT_ERRORS` otherwise.

    Raises:
        OSError: If the input cannot be read or the ledgers cannot be written.
    """
    config = config or CompilerConfig()

    # 1. Read input
    if is_string:
        text = source
    else:
        with open(source, encoding="utf-8") as f:
            text = f.read()

    # 2. Lex and parse
    if from_tokens:
        result = analyze_tokens(parse_token_ledger(text), config)
    else:
        result = analyze(text, config)

    # 3. Write ledgers
    written = write_ledgers(result, config)
    logger.info("Wrote ledgers to %s", written["errors"].parent)

    # 4. Report
    if print_errors:
        for error in result.errors:
            print(format_error(error))

    if result.success:
        logger.info(
            "Analysis succeeded: %d variable(s), %d procedure(s)",
            len(result.variables),
            len(result.procedures),
        )
        return EXIT_OK

    logger.info("Analysis found %d error(s)", len(result.errors))
    return EXIT_ERRORS


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the minipas CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-o`, `--out-dir`: Directory for the ledgers (default from config, `output`).
        - `-c`, `--config`: JSON configuration file.
        - `--from-tokens`: Treat the input as a token ledger.
        - `-p`, `--print`: Print the error ledger.
        - `--verbose`: Enable debug logging.
    """
    parser = argparse.ArgumentParser(prog="minipas")
    parser.add_argument(
        "source", nargs="?", help="Source file, token ledger, or raw source (with -s)"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("-o", "--out-dir", metavar="DIR", help="Directory for output ledgers")
    parser.add_argument("-c", "--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "--from-tokens",
        action="store_true",
        help="Input is a token ledger; skip lexing",
    )
    parser.add_argument(
        "-p", "--print", dest="print_errors", action="store_true", help="Print errors"
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CompilerConfig.load_from_json(args.config) if args.config else CompilerConfig()
        config = config.updated(output_dir=args.out_dir)
    except ConfigError as e:
        print(f"minipas: {e}", file=sys.stderr)
        return EXIT_USAGE

    source = args.source if args.source is not None else config.source_path

    try:
        return run_minipas(
            source=source,
            is_string=args.string,
            from_tokens=args.from_tokens,
            config=config,
            print_errors=args.print_errors,
        )
    except OSError as e:
        print(f"minipas: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
