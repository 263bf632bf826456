#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Loading of Cordova-style build configuration (build.json and friends).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from ..core.models import BuildOptions, BuildType, PackageInfo, PackageType
from ..core.errors import ConfigurationError, ErrorContext

KNOWN_ARCHS = {"arm", "arm64", "x86", "x86_64"}

_OPTION_KEYS = {
    "packageType",
    "arch",
    "gradleArg",
    "keystore",
    "storePassword",
    "alias",
    "password",
    "keystoreType",
}


class BuildConfig:
    """
    Utility class for loading build configuration from files.

    A file either follows the Cordova layout
    ``{"android": {"debug": {...}, "release": {...}}}`` or holds the options
    for one build type at its top level. JSON, YAML and TOML are accepted.
    """

    _SUPPORTED_EXTENSIONS = {
        ".json": "json",
        ".yaml": "yaml",
        ".yml": "yaml",
        ".toml": "toml",
    }

    @classmethod
    def load_from_file(
        cls,
        file_path: Union[Path, str],
        build_type: Union[BuildType, str] = BuildType.DEBUG,
    ) -> Dict[str, Any]:
        """
        Load the options for one build type from a configuration file.

        Args:
            file_path: Path to the configuration file.
            build_type: Which section of a Cordova-style file to use.

        Returns:
            Dict of camelCase option names to values. Relative keystore
            paths are resolved against the file's directory.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        config_path = Path(file_path)

        if not config_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_file=config_path,
                context=ErrorContext(working_directory=config_path.parent),
            )

        suffix = config_path.suffix.lower()
        if suffix not in cls._SUPPORTED_EXTENSIONS:
            supported = ", ".join(cls._SUPPORTED_EXTENSIONS)
            raise ConfigurationError(
                f"Unsupported configuration file format: {suffix}. Supported formats: {supported}",
                config_file=config_path,
            )

        try:
            content = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read configuration file: {e}",
                config_file=config_path,
                cause=e,
            )

        format_type = cls._SUPPORTED_EXTENSIONS[suffix]
        logger.debug(f"Loading {format_type.upper()} configuration from {config_path}")

        match format_type:
            case "json":
                data = cls._parse_json(content, config_path)
            case "yaml":
                data = cls._parse_yaml(content, config_path)
            case _:
                data = cls._parse_toml(content, config_path)

        section = cls._select_section(data, BuildType(build_type))
        return cls._normalize_config(section, config_path)

    @staticmethod
    def _parse_json(content: str, source_file: Optional[Path] = None) -> Dict[str, Any]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON configuration: {e}",
                config_file=source_file,
                context=ErrorContext(
                    additional_info={"line": e.lineno, "column": e.colno}
                ),
            )
        if not isinstance(data, dict):
            raise ConfigurationError(
                "JSON configuration must be an object/dictionary",
                config_file=source_file,
            )
        return data

    @staticmethod
    def _parse_yaml(content: str, source_file: Optional[Path] = None) -> Dict[str, Any]:
        import yaml

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            error_details = {}
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                error_details.update({"line": mark.line + 1, "column": mark.column + 1})
            raise ConfigurationError(
                f"Invalid YAML configuration: {e}",
                config_file=source_file,
                context=ErrorContext(additional_info=error_details),
            )

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "YAML configuration must be a mapping/dictionary",
                config_file=source_file,
            )
        return data

    @staticmethod
    def _parse_toml(content: str, source_file: Optional[Path] = None) -> Dict[str, Any]:
        import tomllib

        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f"Invalid TOML configuration: {e}", config_file=source_file
            )

    @staticmethod
    def _select_section(data: Dict[str, Any], build_type: BuildType) -> Dict[str, Any]:
        if "android" in data:
            data = data["android"] or {}
        if build_type.value in data:
            data = data[build_type.value] or {}
        elif any(bt.value in data for bt in BuildType):
            return {}
        return dict(data)

    @classmethod
    def _normalize_config(
        cls, config_data: Dict[str, Any], source_file: Optional[Path] = None
    ) -> Dict[str, Any]:
        """Drop unknown keys and coerce values to their expected shapes."""
        unknown = set(config_data) - _OPTION_KEYS
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

        config = {k: v for k, v in config_data.items() if k in _OPTION_KEYS and v != ""}

        if "packageType" in config:
            try:
                config["packageType"] = PackageType(str(config["packageType"]).lower())
            except ValueError:
                raise ConfigurationError(
                    f"Invalid packageType: {config['packageType']} (expected apk or bundle)",
                    config_file=source_file,
                    invalid_option="packageType",
                )

        gradle_args = config.get("gradleArg")
        if isinstance(gradle_args, str):
            config["gradleArg"] = gradle_args.split()
        elif gradle_args is not None and not isinstance(gradle_args, list):
            raise ConfigurationError(
                "gradleArg must be a string or a list of strings",
                config_file=source_file,
                invalid_option="gradleArg",
            )

        if "keystore" in config:
            keystore = Path(str(config["keystore"])).expanduser()
            if not keystore.is_absolute() and source_file is not None:
                keystore = source_file.parent / keystore
            config["keystore"] = keystore

        return config

    @classmethod
    def get_default_config_files(cls, directory: Path) -> List[Path]:
        """Configuration files present in directory, in order of preference."""
        candidates = [directory / f"build{ext}" for ext in cls._SUPPORTED_EXTENSIONS]
        return [path for path in candidates if path.is_file()]

    @classmethod
    def auto_discover_config(
        cls,
        start_directory: Union[Path, str],
        build_type: Union[BuildType, str] = BuildType.DEBUG,
    ) -> Optional[Dict[str, Any]]:
        """Search start_directory and its parents for a build configuration."""
        search_dir = Path(start_directory).resolve()

        for directory in [search_dir, *search_dir.parents]:
            config_files = cls.get_default_config_files(directory)
            if config_files:
                logger.info(f"Auto-discovered configuration file: {config_files[0]}")
                return cls.load_from_file(config_files[0], build_type)

        logger.debug("No configuration file auto-discovered")
        return None

    @staticmethod
    def merge_configs(*configs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Merge configurations; later ones win and None values are ignored."""
        merged: Dict[str, Any] = {}
        for config in configs:
            if not config:
                continue
            merged.update({k: v for k, v in config.items() if v is not None})
        return merged

    @staticmethod
    def to_build_options(
        config: Dict[str, Any], build_type: Union[BuildType, str]
    ) -> BuildOptions:
        package_info = None
        if config.get("keystore"):
            package_info = PackageInfo(
                keystore=Path(config["keystore"]),
                store_password=config.get("storePassword"),
                alias=config.get("alias"),
                password=config.get("password"),
                keystore_type=config.get("keystoreType"),
            )

        return BuildOptions(
            build_type=BuildType(build_type),
            package_type=PackageType(config.get("packageType", PackageType.APK)),
            arch=config.get("arch"),
            extra_args=list(config.get("gradleArg") or []),
            package_info=package_info,
        )

    @staticmethod
    def validate_config(options: BuildOptions) -> List[str]:
        """
        Validate build options and return a list of warnings.

        Args:
            options: BuildOptions to validate

        Returns:
            List of validation warning messages
        """
        warnings = []

        if options.arch and options.arch not in KNOWN_ARCHS:
            warnings.append(f"Unusual architecture: {options.arch}")

        if options.arch and options.package_type is PackageType.BUNDLE:
            warnings.append("arch is ignored for bundle builds")

        info = options.package_info
        if info is not None:
            if not info.keystore.exists():
                warnings.append(f"Keystore does not exist: {info.keystore}")
            if not info.alias:
                warnings.append("Signing configuration has no key alias")
            if not info.store_password:
                warnings.append(
                    "Signing configuration has no store password; Gradle will prompt"
                )
        elif options.build_type is BuildType.RELEASE:
            warnings.append("Release build without signing configuration will be unsigned")

        return warnings
