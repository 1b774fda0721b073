"""Thin wrapper around external tool invocation"""

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..api.exceptions import SubprocessError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of one external command"""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> 'CommandResult':
        """Raise SubprocessError on a non-zero exit code"""
        if not self.ok:
            raise SubprocessError(self.args, self.returncode, self.stderr or self.stdout)
        return self


class CommandRunner:
    """Runs external tools synchronously

    ``run`` captures output silently. ``stream`` echoes combined output
    line by line while also keeping it for later parsing.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None):
        self.cwd = str(cwd) if cwd else None

    def which(self, tool: str) -> Optional[str]:
        """Locate a tool on PATH"""
        return shutil.which(tool)

    def run(
        self,
        args: List[str],
        env: Optional[Dict[str, str]] = None,
        check: bool = False,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandResult:
        """Run a command and capture stdout and stderr

        Args:
            args: Command and arguments
            env: Full environment for the child process
            check: Raise SubprocessError on non-zero exit
            cwd: Working directory, defaults to the runner's

        Returns:
            CommandResult
        """
        logger.debug("Running: %s", args[0] + " " + " ".join(args[1:2]))
        try:
            completed = subprocess.run(
                args,
                cwd=str(cwd) if cwd else self.cwd,
                env=env,
                capture_output=True,
                text=True
            )
        except FileNotFoundError as e:
            raise SubprocessError(args, 127, message=f"Executable not found: {args[0]}") from e

        result = CommandResult(
            args=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug("%s exited with %d", args[0], result.returncode)

        if check:
            result.check()
        return result

    def stream(
        self,
        args: List[str],
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandResult:
        """Run a command, echoing combined output to stdout as it arrives"""
        logger.debug("Streaming: %s", " ".join(args[:2]))
        lines: List[str] = []
        try:
            process = subprocess.Popen(
                args,
                cwd=str(cwd) if cwd else self.cwd,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True
            )
        except FileNotFoundError as e:
            raise SubprocessError(args, 127, message=f"Executable not found: {args[0]}") from e

        with process:
            for line in process.stdout:
                sys.stdout.write(line)
                lines.append(line)
            returncode = process.wait()

        result = CommandResult(args=list(args), returncode=returncode, stdout="".join(lines))
        if check:
            result.check()
        return result
