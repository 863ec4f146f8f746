from __future__ import annotations

"""
Version information for mint_api.

`__version__` is the package version. `git_describe()` returns
`git describe --tags --dirty --always` when run from a checkout, else None.
"""

import subprocess
from pathlib import Path
from typing import Optional

__version__ = "0.1.0"


def git_describe(cwd: Optional[Path] = None) -> Optional[str]:
    root = cwd or Path(__file__).resolve().parent.parent
    if not (root / ".git").exists():
        return None
    try:
        out = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=2,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.stdout.strip() or None


__all__ = ["__version__", "git_describe"]
