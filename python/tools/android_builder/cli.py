#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line interface for the Android build helper.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from .core.errors import AndroidBuildError, ConfigurationError
from .core.models import BuildOptions, BuildType, PackageType
from .builders.project_builder import ProjectBuilder
from .utils.config import BuildConfig
from . import __version__


def setup_logging(args: argparse.Namespace) -> None:
    """Set up console and optional file logging."""
    logger.remove()

    log_level = args.log_level
    if args.verbose and log_level == "INFO":
        log_level = "DEBUG"

    if log_level in ["DEBUG", "TRACE"]:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        log_format = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        )

    logger.add(sys.stderr, level=log_level, format=log_format, colorize=True)

    if args.log_file:
        logger.add(
            args.log_file,
            level=log_level,
            format=log_format,
            rotation="10 MB",
            retention=3,
            compression="gz",
        )

    logger.debug(f"Logging initialized at {log_level} level")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cordova-android-builder",
        description="Prepare and build a Cordova-style Android platform project with Gradle",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog="Examples:\n"
               "  %(prog)s build --release --package-type bundle\n"
               "  %(prog)s build --arch arm64 --gradle-arg=--stacktrace\n"
               "  %(prog)s outputs --release",
    )
    parser.add_argument("--version", action="version",
                        version=f"Android Build Helper v{__version__}")

    common = argparse.ArgumentParser(add_help=False)

    project_group = common.add_argument_group("Project")
    project_group.add_argument("--root", type=Path, default=Path(".").resolve(),
                               help="Android platform project root")
    variant = project_group.add_mutually_exclusive_group()
    variant.add_argument("--debug", dest="build_type", action="store_const",
                         const=BuildType.DEBUG, help="Debug build (default)")
    variant.add_argument("--release", dest="build_type", action="store_const",
                         const=BuildType.RELEASE, help="Release build")
    project_group.add_argument("--package-type", choices=[p.value for p in PackageType],
                               help="Artifact type to produce (default: apk)")
    project_group.add_argument("--arch", help="Target CPU architecture for APK builds")
    project_group.add_argument("--gradle-arg", dest="gradle_args", action="append",
                               default=[], metavar="ARG",
                               help="Extra argument passed through to Gradle")

    signing_group = common.add_argument_group("Signing")
    signing_group.add_argument("--keystore", type=Path, help="Keystore file")
    signing_group.add_argument("--store-password", help="Keystore password")
    signing_group.add_argument("--alias", help="Key alias")
    signing_group.add_argument("--password", help="Key password")
    signing_group.add_argument("--keystore-type", help="Keystore type (jks, pkcs12)")

    config_group = common.add_argument_group("Configuration")
    config_group.add_argument("--config", type=Path,
                              help="Load options from build.json / .yaml / .toml")
    config_group.add_argument("--no-auto-config", dest="auto_config",
                              action="store_false",
                              help="Do not search for build.json above the project root")

    logging_group = common.add_argument_group("Logging and Debugging")
    logging_group.add_argument("--verbose", action="store_true",
                               help="Enable verbose output")
    logging_group.add_argument("--log-level",
                               choices=["TRACE", "DEBUG", "INFO", "SUCCESS",
                                        "WARNING", "ERROR", "CRITICAL"],
                               default="INFO", help="Set the logging level")
    logging_group.add_argument("--log-file", type=Path, help="Also log to this file")
    logging_group.add_argument("--dry-run", action="store_true",
                               help="Show the Gradle command without running anything")

    subparsers = parser.add_subparsers(dest="command", required=True)
    build_cmd = subparsers.add_parser("build", parents=[common],
                                      help="Prepare the project and build it")
    build_cmd.add_argument("--clean", action="store_true",
                           help="Clean before building")
    subparsers.add_parser("prepare", parents=[common],
                          help="Generate the wrapper, settings.gradle and signing files")
    subparsers.add_parser("clean", parents=[common],
                          help="Run gradle clean and remove generated signing files")
    subparsers.add_parser("outputs", parents=[common],
                          help="List built artifacts, best match first")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.build_type is None:
        args.build_type = BuildType.DEBUG
    return args


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Command-line options in build.json key form."""
    return {
        "packageType": PackageType(args.package_type) if args.package_type else None,
        "arch": args.arch,
        "gradleArg": args.gradle_args or None,
        "keystore": args.keystore.resolve() if args.keystore else None,
        "storePassword": args.store_password,
        "alias": args.alias,
        "password": args.password,
        "keystoreType": args.keystore_type,
    }


def resolve_options(args: argparse.Namespace) -> BuildOptions:
    """Merge file configuration with command-line options, command line winning."""
    file_config = None
    if args.config:
        file_config = BuildConfig.load_from_file(args.config, args.build_type)
        logger.info(f"Loaded configuration from {args.config}")
    elif args.auto_config:
        file_config = BuildConfig.auto_discover_config(args.root, args.build_type)

    merged = BuildConfig.merge_configs(file_config, options_from_args(args))
    options = BuildConfig.to_build_options(merged, args.build_type)

    for warning in BuildConfig.validate_config(options):
        logger.warning(warning)

    return options


async def amain(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args)
    logger.info(f"Android Build Helper v{__version__} starting")

    try:
        if not args.root.is_dir():
            logger.error(f"Project root does not exist: {args.root}")
            return 1

        try:
            options = resolve_options(args)
        except ConfigurationError as e:
            logger.error(f"Failed to load configuration: {e}")
            return 1

        builder = ProjectBuilder(args.root, verbose=args.verbose)
        logger.debug(f"Build options: {options.to_dict()}")

        match args.command:
            case "outputs":
                if options.package_type is PackageType.BUNDLE:
                    paths = builder.find_output_bundles(options.build_type)
                else:
                    paths = builder.find_output_apks(options.build_type, options.arch)
                print(json.dumps([str(p) for p in paths], indent=2))
                return 0

            case "clean":
                if args.dry_run:
                    logger.info(f"Would run: {builder.wrapper} "
                                f"{' '.join(builder.get_args('clean', options))}")
                    return 0
                await builder.clean(options)
                logger.success("Clean completed")
                return 0

            case "prepare":
                if args.dry_run:
                    logger.info("Would prepare the Gradle wrapper, settings.gradle, "
                                "app/build.gradle and signing properties")
                    return 0
                await builder.prep_env(options)
                logger.success("Project prepared")
                return 0

            case "build":
                cmd_name = "debug" if options.build_type is BuildType.DEBUG else "release"
                if args.dry_run:
                    logger.info(f"Would run: {builder.wrapper} "
                                f"{' '.join(builder.get_args(cmd_name, options))}")
                    return 0
                await builder.full_build_workflow(options, clean_first=args.clean)
                if options.package_type is PackageType.BUNDLE:
                    artifacts = builder.find_output_bundles(options.build_type)
                else:
                    artifacts = builder.fetch_build_results(
                        options.build_type, options.arch
                    ).apk_paths
                for artifact in artifacts:
                    logger.info(f"Built {artifact}")
                logger.success("Build completed successfully")
                return 0

        return 1

    except AndroidBuildError as e:
        logger.error(f"{args.command.capitalize()} failed: {e.message}")
        if args.verbose:
            logger.debug(f"Error context: {e.context.to_dict()}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Unexpected error occurred: {e}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the build helper from the command line."""
    try:
        return asyncio.run(amain(argv))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
