# deploy_pipeline/core/process_runner.py
"""External process execution"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..constants import EXIT_LAUNCH_FAILURE, EXIT_TIMEOUT


def render_command(template: str, **fields: Any) -> List[str]:
    """
    Render a command template into an argument list

    The template is split first and each argument formatted afterwards,
    so a substituted path containing spaces stays a single argument.

    Args:
        template: Command template, e.g. ``git pull origin {branch}``
        **fields: Values substituted into ``{placeholders}``

    Returns:
        Argument list
    """
    return [arg.format(**fields) for arg in shlex.split(template)]


class ProcessRunner:
    """Run external commands and report their exit code

    Output of the child process is not captured; it goes wherever the
    parent's stdout and stderr go.
    """

    def __init__(self, timeout: Optional[float] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            timeout: Seconds before a child is killed, None to wait forever
            logger: Logger for launch failures and timeouts
        """
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> int:
        """
        Run a command and block until it exits

        Args:
            command: Argument list
            cwd: Working directory, None for the current directory

        Returns:
            Process exit code, ``EXIT_LAUNCH_FAILURE`` if the command could
            not be started and ``EXIT_TIMEOUT`` if it was killed on timeout
        """
        display = " ".join(command)
        self.logger.debug(f"Running '{display}' in {cwd or Path.cwd()}")

        try:
            completed = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd is not None else None,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            self.logger.error(f"Command '{display}' timed out after {self.timeout}s")
            return EXIT_TIMEOUT
        except OSError as e:
            self.logger.error(f"Unable to launch '{display}': {e}")
            return EXIT_LAUNCH_FAILURE

        return completed.returncode
