#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utility modules for the Android build helper.

This module provides configuration loading, properties file editing, Gradle
file generation, output discovery and environment checks.
"""

from __future__ import annotations

from .config import BuildConfig
from .properties import PropertiesEditor, create_editor, read_project_properties

__all__ = [
    "BuildConfig",
    "PropertiesEditor",
    "create_editor",
    "read_project_properties",
]
