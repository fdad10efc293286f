"""테스트 스위트를 순서대로 실행하는 CI 러너입니다."""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from consensus.config import settings

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parents[2]
TESTS_DIR = BACKEND_DIR / "tests"
API_TEST_GLOB = "test_api_*.py"


class CISuiteFailed(RuntimeError):
    def __init__(self, suite: str, returncode: int):
        super().__init__(f"Test suite '{suite}' failed with exit status {returncode}")
        self.suite = suite
        self.returncode = returncode


def suite_commands() -> Dict[str, List[str]]:
    pytest = [sys.executable, "-m", "pytest"]
    return {
        "domain": pytest + [str(TESTS_DIR), f"--ignore-glob=*/{API_TEST_GLOB}"],
        "api": pytest + sorted(str(path) for path in TESTS_DIR.glob(API_TEST_GLOB)),
    }


def run_suites(names: Optional[Sequence[str]] = None, env: Optional[Dict[str, str]] = None) -> None:
    """Run the named suites in order; the first failure stops the run."""
    commands = suite_commands()
    selected = list(names or commands.keys())
    unknown = [name for name in selected if name not in commands]
    if unknown:
        raise ValueError(f"Unknown suite(s): {', '.join(unknown)}")

    run_env = dict(os.environ if env is None else env)
    run_env["DISPLAY"] = settings.CI_DISPLAY

    for name in selected:
        logger.info("[ci] running suite %s", name)
        result = subprocess.run(commands[name], cwd=str(BACKEND_DIR), env=run_env)
        if result.returncode != 0:
            logger.error("[ci] suite %s failed (exit %s)", name, result.returncode)
            raise CISuiteFailed(name, result.returncode)
        logger.info("[ci] suite %s passed", name)
