"""Run the CI test suites in sequence.

Usage:
  python scripts/run_ci.py                 # domain suite, then api suite
  python scripts/run_ci.py --suite api     # api suite only
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from consensus.utils.ci_runner import CISuiteFailed, run_suites, suite_commands


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--suite",
        action="append",
        choices=sorted(suite_commands().keys()),
        help="Run only this suite (repeatable)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        run_suites(args.suite)
    except CISuiteFailed as exc:
        print(f"CI failed: {exc}")
        sys.exit(exc.returncode or 1)
    print("CI passed.")


if __name__ == "__main__":
    main()
