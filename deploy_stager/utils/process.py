# deploy_stager/utils/process.py
"""Subprocess execution with explicit exit statuses"""

import asyncio
import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..api.exceptions import CommandFailedError

logger = logging.getLogger(__name__)

# handler(state, stream, text) -> optional reply written to stdin
DataHandler = Callable[[Dict[str, Any], str, str], Optional[str]]

Command = Union[str, Sequence[str]]

READ_CHUNK_SIZE = 4096
COMMAND_NOT_FOUND = 127


@dataclass
class CommandOutcome:
    """Result of a finished command"""
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)

    def check(self) -> 'CommandOutcome':
        """Raise CommandFailedError unless the command succeeded"""
        if not self.succeeded:
            raise CommandFailedError(self.command, self.returncode, self.stderr or self.stdout)
        return self


def join_command(command: Command) -> str:
    """Render argv as a single shell line"""
    if isinstance(command, str):
        return command
    return " ".join(shlex.quote(str(part)) for part in command)


async def run_command(command: Command,
                      cwd: Optional[Union[str, Path]] = None,
                      data_handler: Optional[DataHandler] = None,
                      env: Optional[Dict[str, str]] = None,
                      timeout: Optional[float] = None) -> CommandOutcome:
    """
    Run a command and return its outcome

    A string command is run through the shell, a sequence is executed
    directly. Output is read in chunks; when a data handler is given every
    chunk is passed to it and a non-None reply is written to the process
    stdin.

    Args:
        command: Shell line or argv
        cwd: Working directory
        data_handler: Out-of-band data hook
        env: Extra environment variables
        timeout: Seconds before the process is killed

    Returns:
        CommandOutcome with the exit status
    """
    rendered = join_command(command)
    stdin = asyncio.subprocess.PIPE if data_handler else asyncio.subprocess.DEVNULL

    process_env = None
    if env:
        process_env = os.environ.copy()
        process_env.update(env)

    logger.debug(f"executing: {rendered}" + (f" (in {cwd})" if cwd else ""))

    try:
        if isinstance(command, str):
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=str(cwd) if cwd else None,
                env=process_env,
                stdin=stdin,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        else:
            process = await asyncio.create_subprocess_exec(
                *[str(part) for part in command],
                cwd=str(cwd) if cwd else None,
                env=process_env,
                stdin=stdin,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
    except FileNotFoundError as e:
        return CommandOutcome(rendered, COMMAND_NOT_FOUND, stderr=str(e))

    state: Dict[str, Any] = {}
    chunks: Dict[str, List[str]] = {"stdout": [], "stderr": []}

    async def pump(reader: asyncio.StreamReader, stream: str) -> None:
        while True:
            data = await reader.read(READ_CHUNK_SIZE)
            if not data:
                break
            text = data.decode(errors="replace")
            chunks[stream].append(text)

            if data_handler is None:
                continue
            reply = data_handler(state, stream, text)
            if reply is not None and process.stdin is not None:
                try:
                    process.stdin.write(reply.encode() if isinstance(reply, str) else reply)
                    await process.stdin.drain()
                except (BrokenPipeError, ConnectionResetError):
                    logger.debug(f"process closed stdin before reply could be sent: {rendered}")

    timed_out = False
    try:
        await asyncio.wait_for(
            asyncio.gather(
                pump(process.stdout, "stdout"),
                pump(process.stderr, "stderr"),
                process.wait()
            ),
            timeout=timeout
        )
    except asyncio.TimeoutError:
        timed_out = True
        process.kill()
        await process.wait()
        logger.error(f"command timed out after {timeout}s: {rendered}")
    finally:
        if process.stdin is not None and not process.stdin.is_closing():
            process.stdin.close()

    return CommandOutcome(
        command=rendered,
        returncode=process.returncode,
        stdout="".join(chunks["stdout"]),
        stderr="".join(chunks["stderr"]),
        timed_out=timed_out
    )
