#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for the Android build helper.
"""

from __future__ import annotations

import time
from enum import Enum, auto
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from loguru import logger


class BuildStatus(Enum):
    """Enumeration of possible build status values."""

    NOT_STARTED = auto()
    PREPARING = auto()
    BUILDING = auto()
    CLEANING = auto()
    COMPLETED = auto()
    FAILED = auto()


class PackageType(str, Enum):
    """Artifact flavour produced by Gradle."""

    APK = "apk"
    BUNDLE = "bundle"

    @property
    def extension(self) -> str:
        return "aab" if self is PackageType.BUNDLE else "apk"


class BuildType(str, Enum):
    """Gradle build variant."""

    DEBUG = "debug"
    RELEASE = "release"


@dataclass
class BuildResult:
    """Data class to store the outcome of a single command."""

    success: bool
    output: str
    error: str = ""
    exit_code: int = 0
    execution_time: float = 0.0
    timestamp: float = field(default_factory=time.time)

    @property
    def failed(self) -> bool:
        """Convenience property to check if the command failed."""
        return not self.success

    def log_result(self, operation: str) -> None:
        if self.success:
            logger.debug(
                f"{operation} finished in {self.execution_time:.2f}s",
                extra={"execution_time": self.execution_time},
            )
        else:
            logger.warning(
                f"{operation} exited with code {self.exit_code} "
                f"after {self.execution_time:.2f}s",
                extra={"execution_time": self.execution_time},
            )


@dataclass(frozen=True)
class ProjectProperties:
    """References parsed from project.properties."""

    libs: List[str] = field(default_factory=list)
    gradle_includes: List[str] = field(default_factory=list)
    system_libs: List[str] = field(default_factory=list)


class PropertiesSink(Protocol):
    def set(self, key: str, value: str) -> None: ...


@dataclass
class PackageInfo:
    """Release signing configuration written to <buildType>-signing.properties."""

    keystore: Path
    store_password: Optional[str] = None
    alias: Optional[str] = None
    password: Optional[str] = None
    keystore_type: Optional[str] = None

    def append_to_properties(self, properties: PropertiesSink) -> None:
        properties.set("storeFile", str(self.keystore))
        if self.keystore_type:
            properties.set("storeType", self.keystore_type)
        if self.alias:
            properties.set("keyAlias", self.alias)
        if self.store_password:
            properties.set("storePassword", self.store_password)
        if self.password:
            properties.set("keyPassword", self.password)


@dataclass
class BuildOptions:
    """Options controlling a single prepare/build/clean run."""

    build_type: BuildType = BuildType.DEBUG
    package_type: PackageType = PackageType.APK
    arch: Optional[str] = None
    extra_args: List[str] = field(default_factory=list)
    package_info: Optional[PackageInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "build_type": self.build_type.value,
            "package_type": self.package_type.value,
            "arch": self.arch,
            "extra_args": list(self.extra_args),
            "package_info": (
                {
                    "keystore": str(self.package_info.keystore),
                    "store_password": self.package_info.store_password,
                    "alias": self.package_info.alias,
                    "password": self.package_info.password,
                    "keystore_type": self.package_info.keystore_type,
                }
                if self.package_info
                else None
            ),
        }


@dataclass
class BuildResults:
    """Artifacts located after a build."""

    apk_paths: List[Path]
    build_type: BuildType

    @property
    def primary(self) -> Optional[Path]:
        """The best-ranked artifact, if any."""
        return self.apk_paths[0] if self.apk_paths else None
