#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core components for the Android build helper.
"""

from .base import BuildHelperBase
from .models import (
    BuildStatus,
    BuildResult,
    BuildResults,
    BuildOptions,
    BuildType,
    PackageInfo,
    PackageType,
    ProjectProperties,
)
from .errors import (
    AndroidBuildError,
    ConfigurationError,
    ManifestError,
    UnsupportedLibraryError,
    BuildError,
    RequirementsError,
)

__all__ = [
    "BuildHelperBase",
    "BuildStatus",
    "BuildResult",
    "BuildResults",
    "BuildOptions",
    "BuildType",
    "PackageInfo",
    "PackageType",
    "ProjectProperties",
    "AndroidBuildError",
    "ConfigurationError",
    "ManifestError",
    "UnsupportedLibraryError",
    "BuildError",
    "RequirementsError",
]
