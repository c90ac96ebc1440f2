"""Interactive shell for inspecting and editing a collabdb store."""

from __future__ import annotations

import argparse
import asyncio
import logging
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Any

from collabdb.client import BackendConfig, Client, create_client
from collabdb.parsing.query_parser import QueryParser, split_statements
from collabdb.statements import StatementExecutor, StatementResult

# Shell round trips should feel instant
DEFAULT_SHELL_LATENCY = 0.001

HISTORY_FILE = Path.home() / ".collabdb_history"

MAX_CELL_WIDTH = 40


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width - 3] + "..."


def format_value(value: Any, max_items: int = 10, max_width: int = MAX_CELL_WIDTH) -> str:
    """Render one cell. Embedded objects and lists render inline.

    Strings are quoted, lists show at most max_items entries, and every
    rendering is clipped to max_width characters.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, str):
        return repr(_clip(value, max_width))
    if isinstance(value, dict):
        inner = ", ".join(f"{key}: {format_value(item, max_items, max_width)}" for key, item in value.items())
        return _clip("{" + inner + "}", max_width)
    if isinstance(value, (list, tuple)):
        shown = [format_value(item, max_items, max_width) for item in value[:max_items]]
        if len(value) > max_items:
            shown.append(f"...+{len(value) - max_items} more")
        return _clip("[" + ", ".join(shown) + "]", max_width)
    return _clip(str(value), max_width)


def _table_lines(columns: list[str], rows: list[dict[str, Any]]) -> list[str]:
    cells = [[format_value(row.get(column)) for column in columns] for row in rows]
    widths = [
        min(MAX_CELL_WIDTH, max([len(column)] + [len(line[i]) for line in cells]))
        for i, column in enumerate(columns)
    ]

    def join(values: list[str]) -> str:
        return " | ".join(_clip(value, width).ljust(width) for value, width in zip(values, widths))

    header = join(columns)
    return [header, "-" * len(header)] + [join(line) for line in cells]


def print_result(result: StatementResult) -> None:
    """Print a statement result: error, message, then rows as a table."""
    if result.error:
        print(f"Error: {result.error}")
        return
    if result.message:
        print(result.message)
    if not result.rows:
        if not result.message:
            print("(no results)")
        return

    for line in _table_lines(result.columns, result.rows):
        print(line)
    count = len(result.rows)
    print(f"\n({count} row{'' if count == 1 else 's'})")


def print_help() -> None:
    """Print help information."""
    print("""
collabdb shell

INSPECT:
  show tables                          List all tables with row counts
  describe <table>                     Show columns and relations of a table
  count <table> [where ...]            Count matching rows

QUERY:
  from <table>
    [select <columns>]                 Columns, aliases and embeds:
                                         id, title, college:colleges(name)
    [where <cond> and <cond> ...]      col = value, col >= number,
                                         col in (v1, v2), col ilike "%text%"
    [order by <col> [asc|desc]]
    [limit <n>]

MODIFY:
  insert into <table> (col=value, ...)
  upsert into <table> (col=value, ...) [on conflict col, ...]
  update <table> set col=value, ... [where ...]
  delete from <table> [where ...]

VALUES:
  "text", 42, 3.5, -1, true, false, null
  Wrap a column named like a keyword in backticks: `order`

OTHER:
  help                                 Show this help
  exit, quit                           Exit the shell
  clear                                Clear the screen

Statements can span multiple lines. End with semicolon or press Enter on empty line.
""")


def execute_text(executor: StatementExecutor, parser: QueryParser, text: str) -> StatementResult:
    """Parse and run one statement to completion."""
    statement = parser.parse(text)
    return asyncio.run(executor.execute(statement))


def run_statement(executor: StatementExecutor, parser: QueryParser, text: str) -> bool:
    """Run one statement and print its outcome. Returns False on any failure."""
    try:
        result = execute_text(executor, parser, text)
    except SyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return False
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return False
    print_result(result)
    return result.error is None


def _read_statement(line: str) -> str:
    # Keep reading until a semicolon ends the statement or a blank line is entered
    while not line.endswith(";"):
        try:
            more = input("...> ").strip()
        except EOFError:
            break
        if not more:
            break
        line = f"{line} {more}"
    return line


def run_repl(client: Client) -> int:
    """Run the interactive shell."""
    print("collabdb shell - in-memory collaboration backend")
    print(f"{len(client.store.table_names())} tables loaded.")
    print("Type 'help' for commands, 'exit' to quit.\n")

    parser = QueryParser()
    executor = StatementExecutor(client)
    try:
        readline.read_history_file(HISTORY_FILE)
    except FileNotFoundError:
        pass

    try:
        while True:
            try:
                line = input("collabdb> ").strip()
            except EOFError:
                print()
                break

            command = line.lower()
            if not command:
                continue
            if command in ("exit", "quit"):
                break
            if command == "help":
                print_help()
                continue
            if command == "clear":
                print("\033[2J\033[H", end="")
                continue

            run_statement(executor, parser, _read_statement(line))
            print()
    finally:
        try:
            readline.set_history_length(1000)
            readline.write_history_file(HISTORY_FILE)
        except OSError:
            pass

    return 0


def run_file(file_path: Path, client: Client, verbose: bool = False) -> int:
    """Execute the statements of a file in order, stopping at the first failure.

    Returns 0 when every statement succeeded and 1 otherwise.
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    statements = split_statements(content)
    if not statements:
        print("No statements found in file", file=sys.stderr)
        return 1

    parser = QueryParser()
    executor = StatementExecutor(client)
    for text in statements:
        if verbose:
            first, *rest = text.split("\n")
            print(f">>> {first}")
            for line in rest:
                print(f"... {line}")
        if not run_statement(executor, parser, text):
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive shell for the collabdb in-memory backend"
    )
    arg_parser.add_argument("-c", "--command", help="Execute a single statement and exit")
    arg_parser.add_argument("-f", "--file", type=Path, help="Execute statements from a file and exit")
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Echo each statement before executing (with -f)",
    )
    arg_parser.add_argument("--empty", action="store_true", help="Start with empty tables instead of demo content")
    arg_parser.add_argument(
        "--latency",
        type=float,
        default=DEFAULT_SHELL_LATENCY,
        help=f"Simulated round-trip latency in seconds (default: {DEFAULT_SHELL_LATENCY})",
    )
    arg_parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = BackendConfig(query_latency=args.latency, storage_latency=args.latency, seed=not args.empty)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    client = create_client(config)

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, client, args.verbose)
    if args.command:
        ok = run_statement(StatementExecutor(client), QueryParser(), args.command)
        return 0 if ok else 1
    return run_repl(client)


if __name__ == "__main__":
    sys.exit(main())
