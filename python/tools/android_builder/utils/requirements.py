#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Environment checks for the Gradle toolchain and the Android SDK.
"""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from ..core.errors import AndroidBuildError, ErrorContext, RequirementsError

MISSING_TARGET_MESSAGE = "failed to find target with hash string"

_TARGET_HASH = re.compile(MISSING_TARGET_MESSAGE + r"\s+'([^']+)'")


def check_gradle() -> str:
    """
    Locate the gradle executable used to generate the wrapper.

    ``CORDOVA_ANDROID_GRADLE`` overrides the PATH lookup.
    """
    override = os.environ.get("CORDOVA_ANDROID_GRADLE")
    if override:
        if not Path(override).is_file():
            raise RequirementsError(
                f"CORDOVA_ANDROID_GRADLE points to a missing file: {override}",
                missing_dependency="gradle",
            )
        logger.debug(f"Using gradle from CORDOVA_ANDROID_GRADLE: {override}")
        return override

    gradle = shutil.which("gradle")
    if not gradle:
        raise RequirementsError(
            "Could not find an installed version of Gradle either in Android "
            "Studio or on your system to install the gradle wrapper.",
            missing_dependency="gradle",
            install_hint="Install Gradle and make sure it is on your PATH",
        )

    logger.debug(f"Found gradle at {gradle}")
    return gradle


def get_android_sdk_root() -> Optional[Path]:
    for variable in ("ANDROID_SDK_ROOT", "ANDROID_HOME"):
        value = os.environ.get(variable)
        if value:
            return Path(value)
    return None


def extract_missing_target(error: Union[Exception, str]) -> Optional[str]:
    text = error.output if isinstance(error, AndroidBuildError) else str(error)
    match = _TARGET_HASH.search(text) or _TARGET_HASH.search(str(error))
    return match.group(1) if match else None


async def check_android_target(error: Union[Exception, str]) -> str:
    """
    Diagnose a Gradle failure about a missing compile target.

    Raises RequirementsError naming the platform to install when it is not
    present in the SDK; returns the target otherwise.
    """
    target = extract_missing_target(error)
    if target is None:
        raise RequirementsError(
            "Gradle reported a missing Android target but did not name it.",
            missing_dependency="android-target",
        )

    install_hint = f'sdkmanager "platforms;{target}"'
    sdk_root = get_android_sdk_root()
    if sdk_root is None:
        raise RequirementsError(
            "Neither ANDROID_SDK_ROOT nor ANDROID_HOME is set; "
            f"cannot check for Android target {target}.",
            missing_dependency=target,
            install_hint=install_hint,
        )

    platform_dir = sdk_root / "platforms" / target
    if not platform_dir.is_dir():
        raise RequirementsError(
            f'Please install the Android target "{target}". '
            f"Hint: run `{install_hint}`.",
            missing_dependency=target,
            install_hint=install_hint,
            context=ErrorContext(additional_info={"sdk_root": str(sdk_root)}),
        )

    logger.info(f"Android target {target} is installed at {platform_dir}")
    return target
