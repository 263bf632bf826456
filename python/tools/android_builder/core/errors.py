#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the Android build helper with structured error context.
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, field

from loguru import logger


@dataclass(frozen=True)
class ErrorContext:
    """Context information for build helper errors."""

    command: Optional[str] = None
    exit_code: Optional[int] = None
    working_directory: Optional[Path] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    execution_time: Optional[float] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for structured logging."""
        return {
            "command": self.command,
            "exit_code": self.exit_code,
            "working_directory": (
                str(self.working_directory) if self.working_directory else None
            ),
            "stdout": self.stdout,
            "stderr": self.stderr,
            "execution_time": self.execution_time,
            "additional_info": self.additional_info,
        }


class AndroidBuildError(Exception):
    """
    Base exception class for the Android build helper.

    Carries the command context of the failing step so callers can inspect
    exit codes and captured output without parsing the message.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = recoverable
        self.traceback_str = traceback.format_exc() if cause else None

        logger.error(
            f"{self.__class__.__name__}: {message}",
            extra={
                "error_context": self.context.to_dict(),
                "recoverable": self.recoverable,
                "original_cause": str(cause) if cause else None,
            },
        )

    def __str__(self) -> str:
        base_msg = super().__str__()

        if self.context.command:
            base_msg += f"\nCommand: {self.context.command}"

        if self.context.exit_code is not None:
            base_msg += f"\nExit Code: {self.context.exit_code}"

        if self.context.stderr:
            base_msg += f"\nStderr: {self.context.stderr}"

        if self.cause:
            base_msg += f"\nCaused by: {self.cause}"

        return base_msg

    @property
    def output(self) -> str:
        """Everything the failing command printed, stdout first."""
        return "\n".join(
            part for part in (self.context.stdout, self.context.stderr) if part
        )


def _merge_info(kwargs: Dict[str, Any], **info: Any) -> None:
    """Fold subclass-specific fields into the context's additional_info."""
    additional_info = kwargs.pop("additional_info", {})
    additional_info.update({k: v for k, v in info.items() if v is not None})

    context = kwargs.get("context") or ErrorContext()
    context.additional_info.update(additional_info)
    kwargs["context"] = context


class ConfigurationError(AndroidBuildError):
    """Raised when a build configuration file or option is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Optional[Union[str, Path]] = None,
        invalid_option: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        _merge_info(
            kwargs,
            config_file=str(config_file) if config_file else None,
            invalid_option=invalid_option,
        )
        super().__init__(message, **kwargs)


class ManifestError(AndroidBuildError):
    """Raised when the Android manifest does not declare a package name."""

    def __init__(
        self,
        message: str,
        *,
        manifest_path: Optional[Union[str, Path]] = None,
        **kwargs: Any,
    ) -> None:
        _merge_info(
            kwargs, manifest_path=str(manifest_path) if manifest_path else None
        )
        super().__init__(message, **kwargs)


class UnsupportedLibraryError(AndroidBuildError):
    """Raised for a system library reference with no Maven coordinate."""

    def __init__(
        self, message: str, *, library: Optional[str] = None, **kwargs: Any
    ) -> None:
        _merge_info(kwargs, library=library)
        super().__init__(message, **kwargs)


class BuildError(AndroidBuildError):
    """Raised when a Gradle invocation exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        task: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        _merge_info(kwargs, task=task)
        super().__init__(message, **kwargs)


class RequirementsError(AndroidBuildError):
    """Raised for a missing or unusable tool or SDK component."""

    def __init__(
        self,
        message: str,
        *,
        missing_dependency: Optional[str] = None,
        install_hint: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        _merge_info(
            kwargs, missing_dependency=missing_dependency, install_hint=install_hint
        )
        super().__init__(message, **kwargs)


def handle_build_error(
    func_name: str,
    error: Exception,
    *,
    context: Optional[ErrorContext] = None,
    recoverable: bool = False,
) -> AndroidBuildError:
    """
    Convert generic exceptions to AndroidBuildError with context.

    Args:
        func_name: Name of the function where error occurred
        error: The original exception
        context: Error context information
        recoverable: Whether the error is recoverable

    Returns:
        AndroidBuildError with enhanced context
    """
    if isinstance(error, AndroidBuildError):
        return error

    message = f"Error in {func_name}: {error}"

    if isinstance(error, FileNotFoundError):
        return RequirementsError(
            message,
            context=context,
            cause=error,
            recoverable=recoverable,
            missing_dependency=str(error.filename) if error.filename else None,
        )
    return AndroidBuildError(
        message, context=context, cause=error, recoverable=recoverable
    )
