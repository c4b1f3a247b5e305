"""
Command Runner
Executes external CLIs (docker, soroban) as asyncio subprocesses
"""

import asyncio
import shlex
from typing import List, Optional
from loguru import logger


class CommandError(Exception):
    """Raised when a required external command exits non-zero"""

    def __init__(self, args: List[str], returncode: int, stderr: str = ''):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr

        message = f"Command failed ({returncode}): {shlex.join(self.args_list)}"
        if stderr:
            message += f"\n{stderr.strip()}"

        super().__init__(message)


class CommandResult:
    """Outcome of a finished subprocess"""

    def __init__(self, args: List[str], returncode: int, stdout: str, stderr: str):
        self.args = args
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def __repr__(self):
        return f"CommandResult(args={self.args!r}, returncode={self.returncode})"


class CommandRunner:
    """
    Runs one external command at a time and waits for it to finish

    Every command is logged before it runs, so the log reads like a
    shell trace of the deployment.
    """

    def __init__(self, cwd: Optional[str] = None):
        """
        Initialize Command Runner

        Args:
            cwd: Working directory for spawned commands (None = current)
        """
        self.cwd = cwd

    async def run(self, *args: str, check: bool = True) -> CommandResult:
        """
        Run a command to completion

        Args:
            *args: Program and arguments
            check: Raise CommandError on non-zero exit

        Returns:
            CommandResult with decoded stdout/stderr
        """
        argv = [str(a) for a in args]
        logger.info(f"$ {shlex.join(argv)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd
            )
        except FileNotFoundError:
            logger.error(f"Executable not found: {argv[0]}")
            if check:
                raise CommandError(argv, 127, f"{argv[0]}: command not found")
            return CommandResult(argv, 127, '', f"{argv[0]}: command not found")

        stdout, stderr = await process.communicate()

        result = CommandResult(
            argv,
            process.returncode,
            stdout.decode(errors='replace'),
            stderr.decode(errors='replace')
        )

        if result.stderr.strip():
            logger.debug(result.stderr.strip())

        if check and not result.ok:
            raise CommandError(argv, result.returncode, result.stderr)

        return result
