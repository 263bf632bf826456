#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base class for build helpers providing the shared asynchronous command runner.
"""

from __future__ import annotations

import os
import sys
import asyncio
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, TextIO, Union

from loguru import logger

from .models import BuildStatus, BuildResult, BuildOptions
from .errors import ErrorContext, handle_build_error

CommandRunner = Callable[[List[str]], Awaitable[BuildResult]]


class BuildHelperBase(ABC):
    """
    Abstract base class for build helpers.

    Commands run through ``self.run_command``; their output is echoed to the
    caller's console as it arrives and captured in the returned BuildResult
    so failures can be classified afterwards.

    Attributes:
        root: Path to the platform project root.
        env_vars: Extra environment variables for spawned commands.
        verbose: Flag to enable verbose logging.
        stream_output: Echo command output to stdout/stderr while running.
        run_command: The asynchronous command runner.
    """

    def __init__(
        self,
        root: Union[Path, str],
        env_vars: Optional[Dict[str, str]] = None,
        verbose: bool = False,
        stream_output: bool = True,
        command_runner: Optional[CommandRunner] = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.env_vars = env_vars or {}
        self.verbose = verbose
        self.stream_output = stream_output

        self.status = BuildStatus.NOT_STARTED
        self.last_result: Optional[BuildResult] = None

        self.run_command = command_runner or self._default_run_command_async

        logger.debug(
            f"Initialized {self.__class__.__name__}",
            extra={"root": str(self.root), "verbose": self.verbose},
        )

    @staticmethod
    async def _pump(
        stream: Optional[asyncio.StreamReader], sink: Optional[TextIO]
    ) -> str:
        """Read a subprocess stream to EOF, echoing each line to sink."""
        if stream is None:
            return ""

        chunks: List[str] = []
        while True:
            line = await stream.readline()
            if not line:
                break
            text = line.decode("utf-8", errors="replace")
            chunks.append(text)
            if sink is not None:
                sink.write(text)
                sink.flush()
        return "".join(chunks)

    async def _default_run_command_async(self, cmd: List[str]) -> BuildResult:
        """Run a command in the project root and wait for it to finish."""
        cmd_str = " ".join(cmd)
        logger.info(f"Running: {cmd_str}")

        env = os.environ.copy()
        env.update(self.env_vars)

        start_time = time.time()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                cwd=self.root,
            )

            stdout, stderr = await asyncio.gather(
                self._pump(process.stdout, sys.stdout if self.stream_output else None),
                self._pump(process.stderr, sys.stderr if self.stream_output else None),
            )
            exit_code = await process.wait()

        except Exception as e:
            self.status = BuildStatus.FAILED
            raise handle_build_error(
                "_default_run_command_async",
                e,
                context=ErrorContext(
                    command=cmd_str,
                    working_directory=self.root,
                    execution_time=time.time() - start_time,
                ),
            )

        build_result = BuildResult(
            success=exit_code == 0,
            output=stdout.strip(),
            error=stderr.strip(),
            exit_code=exit_code,
            execution_time=time.time() - start_time,
        )
        build_result.log_result(f"command: {Path(cmd[0]).name}")

        self.last_result = build_result
        if build_result.failed:
            self.status = BuildStatus.FAILED

        return build_result

    def get_status(self) -> BuildStatus:
        """Get current build status."""
        return self.status

    def get_last_result(self) -> Optional[BuildResult]:
        """Get last command result."""
        return self.last_result

    @abstractmethod
    async def prep_env(self, opts: BuildOptions) -> None:
        """Make the project buildable."""

    @abstractmethod
    async def build(self, opts: BuildOptions) -> BuildResult:
        """Build the project."""

    @abstractmethod
    async def clean(self, opts: BuildOptions) -> BuildResult:
        """Clean the project."""

    async def full_build_workflow(
        self, opts: BuildOptions, *, clean_first: bool = False
    ) -> List[BuildResult]:
        """
        Prepare the project and build it, optionally cleaning first.

        Args:
            opts: Build options for every step
            clean_first: Whether to run the clean step before building

        Returns:
            List of BuildResult objects for each command step
        """
        results: List[BuildResult] = []

        if clean_first:
            results.append(await self.clean(opts))

        await self.prep_env(opts)
        results.append(await self.build(opts))

        return results
