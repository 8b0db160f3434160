import os
import sys
import subprocess
from pathlib import Path

import pytest


SRC_DIR = Path(__file__).resolve().parents[1] / "src"


@pytest.fixture
def run_python(tmp_path):
    """
    Run a Python snippet in a fresh interpreter with `cf_ddns` importable.

    HOME points into tmp_path so nothing touches the real ~/.cache.
    """
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    env["HOME"] = str(tmp_path)
    env["PYTHONIOENCODING"] = "utf-8"

    def _run(code: str, *args: str, wait: bool = True, timeout: float = 60):
        cmd = [sys.executable, "-c", code, *args]
        if not wait:
            return subprocess.Popen(
                cmd, env=env, cwd=tmp_path,
                stdout=subprocess.PIPE, stderr=subprocess.PIPE, encoding="utf-8",
            )
        return subprocess.run(
            cmd, env=env, cwd=tmp_path,
            capture_output=True, encoding="utf-8", timeout=timeout,
        )

    return _run
