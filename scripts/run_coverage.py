#!/usr/bin/env python3
"""Run the test suite under coverage and enforce a minimum threshold.

Usage:
    python scripts/run_coverage.py [OPTIONS]

Options:
    --threshold PERCENT    Minimum coverage percentage (default: 90)
    --html                 Generate HTML coverage report
    --xml                  Generate XML coverage report for CI tools
    --verbose              Show missing lines per module
    --integration          Also run the Docker-backed integration suite
    --parallel N           Number of xdist workers (0 = auto, -1 = disabled)

Exit Codes:
    0 - Success, coverage threshold met
    1 - Tests failed
    2 - Coverage below threshold
    3 - Configuration or runtime error
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE = "hazelcast_exchange"
DEFAULT_THRESHOLD = 90
INTEGRATION_TESTS = "tests/integration"

MODULES = [
    ("hazelcast_exchange.constants", "Headers and operation codes"),
    ("hazelcast_exchange.exchange", "Exchange model"),
    ("hazelcast_exchange.helper", "Header decoding and propagation"),
    ("hazelcast_exchange.dispatcher.map", "Map dispatcher"),
    ("hazelcast_exchange.component", "Component lifecycle"),
    ("hazelcast_exchange.config", "Configuration"),
    ("hazelcast_exchange.exceptions", "Exceptions"),
    ("hazelcast_exchange.logging", "Logging"),
]


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run pytest with coverage validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD)
    parser.add_argument("--html", action="store_true")
    parser.add_argument("--xml", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--integration", action="store_true")
    parser.add_argument("--parallel", "-n", type=int, default=-1)
    return parser.parse_args()


def build_pytest_command(args: argparse.Namespace) -> list:
    """Build the pytest command line."""
    cmd = [
        sys.executable, "-m", "pytest",
        f"--cov={PACKAGE}",
        f"--cov-fail-under={args.threshold}",
        "--cov-report=term-missing" if args.verbose else "--cov-report=term",
    ]

    if args.html:
        cmd.append("--cov-report=html:htmlcov")
    if args.xml:
        cmd.append("--cov-report=xml:coverage.xml")

    if args.parallel > 0:
        cmd.extend(["-n", str(args.parallel)])
    elif args.parallel == 0:
        cmd.extend(["-n", "auto"])

    if not args.integration:
        cmd.append(f"--ignore={INTEGRATION_TESTS}")

    cmd.append("tests/")
    return cmd


def run_coverage(args: argparse.Namespace) -> int:
    """Run the suite and translate the pytest exit status.

    Returns:
        Exit code (0=success, 1=test failure, 2=coverage failure, 3=error)
    """
    os.chdir(PROJECT_ROOT)
    cmd = build_pytest_command(args)

    print("=" * 70)
    print("HAZELCAST EXCHANGE - COVERAGE VALIDATION")
    print("=" * 70)
    print(f"Threshold: {args.threshold}%")
    print(f"Command:   {' '.join(cmd)}")
    if args.verbose:
        for module, description in MODULES:
            print(f"  {description:<32} {module}")
    print("=" * 70)

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)

    if result.returncode == 0:
        print(f"SUCCESS: Coverage meets or exceeds {args.threshold}% threshold")
        return 0
    if result.returncode == 1:
        print("FAILURE: Tests failed or coverage below threshold")
        return 1
    print(f"ERROR: Unexpected exit code {result.returncode}")
    return 3


def main() -> int:
    """Main entry point."""
    args = parse_args()

    try:
        import pytest  # noqa: F401
        import pytest_cov  # noqa: F401
    except ImportError as e:
        print(f"ERROR: Required package not installed: {e}")
        print("Install with: pip install -e .[dev]")
        return 3

    return run_coverage(args)


if __name__ == "__main__":
    sys.exit(main())
