# edge_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import run
from . import build
from . import push
from . import deploy
from . import doctor

__all__ = [
    "run",
    "build",
    "push",
    "deploy",
    "doctor",
]
