import os
from dataclasses import dataclass, field
from typing import Mapping

import toml

from .cli_logger import logger
from .errors import ConfigurationError
from .models import BuildConfiguration, BuildSystem, CustomCommands, Package, SourceMap

CONFIG_FILE = "ibuild.toml"

DEFAULT_ARCHITECTURES = ("arm64",)
DEFAULT_PLATFORM = "iphoneos"
DEFAULT_DEPLOYMENT_TARGET = "-miphoneos-version-min=9.0"
DEFAULT_XCODE_DEPLOYMENT_TARGET = "9.0"
XCODE_DEPLOYMENT_TARGET_FALLBACK = "IPHONEOS_DEPLOYMENT_TARGET"


@dataclass(frozen=True)
class BuildInputs:
    """Everything the builders take from the process environment.

    Read once by the command line and handed down, so nothing below it looks
    at ``os.environ`` on its own.
    """

    architectures: tuple = DEFAULT_ARCHITECTURES
    platform_name: str = DEFAULT_PLATFORM
    temp_dir: str = None
    deployment_target: str = DEFAULT_DEPLOYMENT_TARGET
    # name=value for xcodebuild
    xcode_deployment_target: str = f"{XCODE_DEPLOYMENT_TARGET_FALLBACK}={DEFAULT_XCODE_DEPLOYMENT_TARGET}"
    environ: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_environ(cls, environ=None):
        environ = dict(os.environ if environ is None else environ)

        architectures = DEFAULT_ARCHITECTURES
        if "ARCHS" in environ:
            architectures = tuple(environ["ARCHS"].split())

        deployment_target = DEFAULT_DEPLOYMENT_TARGET
        dt_prefix = environ.get("DEPLOYMENT_TARGET_CLANG_PREFIX")
        dt_name = environ.get("DEPLOYMENT_TARGET_CLANG_ENV_NAME")
        if dt_prefix is not None and dt_name and dt_name in environ:
            deployment_target = dt_prefix + environ[dt_name]

        setting_name = environ.get("DEPLOYMENT_TARGET_SETTING_NAME")
        if setting_name and setting_name in environ:
            xcode_deployment_target = f"{setting_name}={environ[setting_name]}"
        elif XCODE_DEPLOYMENT_TARGET_FALLBACK in environ:
            xcode_deployment_target = f"{XCODE_DEPLOYMENT_TARGET_FALLBACK}={environ[XCODE_DEPLOYMENT_TARGET_FALLBACK]}"
        else:
            xcode_deployment_target = f"{XCODE_DEPLOYMENT_TARGET_FALLBACK}={DEFAULT_XCODE_DEPLOYMENT_TARGET}"

        return cls(
            architectures=architectures,
            platform_name=environ.get("PLATFORM_NAME", DEFAULT_PLATFORM),
            temp_dir=environ.get("CONFIGURATION_TEMP_DIR"),
            deployment_target=deployment_target,
            xcode_deployment_target=xcode_deployment_target,
            environ=environ,
        )


def _string_list(value, key):
    if value is None:
        return None
    if isinstance(value, str) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings.")
    return tuple(value)


def _auxiliary_files(value):
    if value is None:
        return None
    if isinstance(value, dict):
        return tuple((src, dest) for src, dest in value.items())
    paths = _string_list(value, "build.auxiliary_files")
    return tuple((path, os.path.basename(os.path.normpath(path))) for path in paths)


def parse_build_configuration(table):
    """Turn the ``[build]`` table of a manifest into a BuildConfiguration."""
    kind = table.get("build_system")
    try:
        build_system = BuildSystem(kind)
    except ValueError:
        supported = ", ".join(b.value for b in BuildSystem)
        raise ConfigurationError(
            f"Unsupported build_system '{kind}'. Supported build systems are: {supported}."
        ) from None

    arch_args = None
    if table.get("arch_args") is not None:
        arch_args = {
            platform: {
                arch: _string_list(args, f"build.arch_args.{platform}.{arch}")
                for arch, args in archs.items()
            }
            for platform, archs in table["arch_args"].items()
        }

    custom = None
    if "custom" in table:
        custom_table = table["custom"]
        custom = CustomCommands(
            configure=custom_table.get("configure"),
            make=custom_table.get("make"),
            install=custom_table.get("install"),
            env={k: str(v) for k, v in custom_table.get("env", {}).items()},
        )
    elif build_system is BuildSystem.CUSTOM:
        raise ConfigurationError("build_system 'custom' requires a [build.custom] table.")

    return BuildConfiguration(
        build_system=build_system,
        location=table.get("location"),
        args=_string_list(table.get("args"), "build.args"),
        arch_args=arch_args,
        install_command=table.get("install_command"),
        outputs=_string_list(table.get("outputs"), "build.outputs"),
        auxiliary_files=_auxiliary_files(table.get("auxiliary_files")),
        custom=custom,
    )


def load_manifest(path="."):
    """Load ``ibuild.toml`` from ``path``; returns ``(Package, SourceMap)``."""
    config_path = os.path.join(path, CONFIG_FILE)
    logger.info(f"Loading configuration from {config_path}")
    if not os.path.exists(config_path):
        raise ConfigurationError(f"No {CONFIG_FILE} found in {os.path.abspath(path)}.")
    try:
        with open(config_path, "r") as f:
            data = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"Error decoding TOML file at {config_path}: {e}") from e
    except IOError as e:
        raise ConfigurationError(f"Error reading configuration file at {config_path}: {e}") from e

    name = data.get("package", {}).get("name")
    if not name:
        raise ConfigurationError(f"{config_path} has no [package] name.")

    build = None
    if "build" in data:
        build = parse_build_configuration(data["build"])

    source_map = SourceMap(locations=dict(data.get("sources", {})), root=os.path.abspath(path))
    return Package(name=name, build=build), source_map
