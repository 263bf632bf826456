#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Android Build Helper

Prepares a Cordova-style Android platform project (sub-project wiring,
Gradle wrapper, signing properties) and drives its Gradle wrapper to
produce APK and AAB artifacts.
"""

from .utils.config import BuildConfig
from .builders.project_builder import ProjectBuilder
from .core.errors import (
    AndroidBuildError, ConfigurationError, ManifestError,
    UnsupportedLibraryError, BuildError, RequirementsError
)
from .core.models import (
    BuildStatus, BuildResult, BuildResults, BuildOptions,
    BuildType, PackageInfo, PackageType, ProjectProperties
)
from .core.base import BuildHelperBase
import sys
from loguru import logger

# Configure loguru with defaults
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True
)

# Package metadata
__version__ = "1.0.0"
__license__ = "Apache-2.0"


def get_tool_info() -> dict:
    """
    Get metadata about the android_builder module.

    Returns:
        dict: Module metadata including name, version, description, license,
              supported platforms, available functions, requirements and classes.
    """
    return {
        "name": "android_builder",
        "version": __version__,
        "description": "Gradle build orchestration for Cordova-style Android platform projects",
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "functions": [
            "prep_env",
            "prep_build_files",
            "build",
            "clean",
            "find_output_apks",
            "find_output_bundles",
            "fetch_build_results",
            "get_tool_info"
        ],
        "requirements": [
            "gradle",
            "android-sdk",
            "python>=3.11",
            "loguru"
        ],
        "classes": {
            "BuildHelperBase": "Abstract base class with the async command runner",
            "ProjectBuilder": "Gradle driver for an Android platform project",
            "BuildConfig": "build.json / YAML / TOML configuration loading",
            "BuildOptions": "Options for a single prepare/build/clean run",
            "BuildResult": "Outcome of a single command",
            "BuildResults": "Artifacts located after a build",
            "PackageInfo": "Release signing configuration"
        }
    }


__all__ = [
    'BuildHelperBase', 'BuildStatus', 'BuildResult', 'BuildResults',
    'BuildOptions', 'BuildType', 'PackageInfo', 'PackageType',
    'ProjectProperties',
    'AndroidBuildError', 'ConfigurationError', 'ManifestError',
    'UnsupportedLibraryError', 'BuildError', 'RequirementsError',
    'ProjectBuilder', 'BuildConfig',
    'get_tool_info',
    '__version__', '__license__'
]
