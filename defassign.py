# Ethan Doughty
# defassign.py
"""Command-line interface for the defassign definite declaration/assignment checker."""

import argparse
import json
import logging
import time
from pathlib import Path

from ast_printer import fmt_program
from frontend.ir_json import ir_from_json
from analysis import analyze_program
from analysis.context import AnalysisContext
from analysis.diagnostics import problems_to_dicts
from ir import Program, VariableDeclaration, AssignVariable, PrintVariable, FunctionDeclaration, Invocation

logger = logging.getLogger("defassign")


def run_file(file_path: str, show_program: bool = False, as_json: bool = False,
             benchmark: bool = False) -> int:
    """Analyze a single program file.

    Args:
        file_path: Path to a JSON program file
        show_program: If True, print the program as pseudo-source first
        as_json: If True, print problems as a JSON array
        benchmark: If True, print timing breakdown

    Returns:
        Exit code (0 when no problems were found, 1 otherwise)
    """
    path = Path(file_path)
    if not path.exists():
        print(f"ERROR: file not found: {file_path}")
        return 1

    t_start = time.perf_counter()

    try:
        src = path.read_text(encoding="utf-8")
        t_read = time.perf_counter()
        program = ir_from_json(src)
    except ValueError as e:
        print(f"Error while loading {file_path}: {e}")
        return 1

    t_load = time.perf_counter()

    ctx = AnalysisContext()
    problems = analyze_program(program, ctx=ctx)
    t_analyze = time.perf_counter()
    logger.info("Analyzed %d of %d scopes in %s", ctx.analysis_count, len(ctx.scopes), file_path)

    if as_json:
        print(json.dumps(problems_to_dicts(problems), indent=2))
    else:
        if show_program:
            print(f"=== Program {file_path} ===")
            print(fmt_program(program))
            print()
        print(f"=== Analysis for {file_path} ===")
        if not problems:
            print("No problems.")
        else:
            print("Problems:")
            for p in problems:
                print("  -", p)

    if benchmark:
        total_ms = (t_analyze - t_start) * 1000
        print(f"\n--- Benchmark ({len(ctx.scopes)} scopes, {len(problems)} problems) ---")
        print(f"  Read:      {(t_read - t_start) * 1000:7.1f}ms")
        print(f"  Load:      {(t_load - t_read) * 1000:7.1f}ms")
        print(f"  Analyze:   {(t_analyze - t_load) * 1000:7.1f}ms")
        print(f"  Total:     {total_ms:7.1f}ms")

    return 1 if problems else 0


def make_benchmark_program(functions_count: int) -> Program:
    """Build a program declaring and calling functions_count readers of one assigned variable.

        var foo;
        foo = smth;
        func Bar0 { print(foo); }
        Bar0();
        ...
    """
    body = [VariableDeclaration("foo"), AssignVariable("foo")]
    for i in range(functions_count):
        name = f"Bar{i}"
        body.append(FunctionDeclaration(name, [PrintVariable("foo")]))
        body.append(Invocation(name, is_conditional=False))
    return Program(body=body)


def run_benchmark(sizes) -> int:
    """Time the analyzer on generated programs of the given sizes.

    Returns:
        Exit code (0 when every generated program analyzed clean)
    """
    rc = 0
    print("--- Benchmark ---")
    for n in sizes:
        program = make_benchmark_program(n)
        t_start = time.perf_counter()
        problems = analyze_program(program)
        elapsed_ms = (time.perf_counter() - t_start) * 1000
        print(f"  {n:>6} functions: {elapsed_ms:9.1f}ms  ({len(problems)} problems)")
        if problems:
            rc = 1
    return rc


def run_tests() -> int:
    """Run the fixture test suite.

    Returns:
        Exit code (0 for all tests passed, 1 otherwise)
    """
    import run_all_tests

    return run_all_tests.main(return_code=True)


def main(argv=None) -> int:
    """Main entry point for the defassign CLI tool.

    Returns:
        Exit code (0 for success, 1 for problems or errors)
    """
    parser = argparse.ArgumentParser(
        prog="defassign",
        description="defassign: checks that variables are declared before use and assigned before being read"
    )
    parser.add_argument("file", nargs="?", help="JSON program file to analyze")
    parser.add_argument(
        "--tests",
        action="store_true",
        help="Run fixture test suite"
    )
    parser.add_argument(
        "--print",
        dest="show_program",
        action="store_true",
        help="Print the program as pseudo-source before the analysis"
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print problems as JSON"
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Print timing breakdown; without a file, time generated programs instead"
    )
    parser.add_argument(
        "--sizes",
        nargs="+",
        type=int,
        default=[10, 100, 1000, 5000],
        metavar="N",
        help="Function counts of the generated benchmark programs"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.tests:
        return run_tests()

    if args.benchmark and not args.file:
        return run_benchmark(args.sizes)

    if not args.file:
        parser.print_help()
        return 1

    return run_file(args.file, show_program=args.show_program, as_json=args.as_json,
                    benchmark=args.benchmark)


if __name__ == "__main__":
    raise SystemExit(main())
