import os
from ..cli_logger import logger
from ..errors import ConfigurationError, PackageNotFoundError
from ..models import BuildSystem
from ..toolchain import build_products_root, resolve_toolchain
from .cmake import CMakeBackend
from .custom import CustomBackend
from .make import MakeBackend
from .pipeline import Builder
from .xcode import XcodeBackend

BACKENDS = {
    BuildSystem.MAKE: MakeBackend,
    BuildSystem.CMAKE: CMakeBackend,
    BuildSystem.XCODE: XcodeBackend,
    BuildSystem.CUSTOM: CustomBackend,
}

_missing = set(BuildSystem) - set(BACKENDS)
if _missing:
    raise ImportError(f"No backend registered for build systems: {sorted(b.value for b in _missing)}")


def backend_for(build_system):
    try:
        return BACKENDS[BuildSystem(build_system)]()
    except (KeyError, ValueError):
        raise ConfigurationError(f"Unsupported build system: {build_system}") from None


def builder_for_package(package, package_root, source_map, build_root, inputs, discovery, runner):
    """Create the Builder for ``package``, or None when it has nothing to build."""
    configuration = package.build
    if configuration is None:
        logger.info(f"Package {package.name} has no build configuration. Nothing to build.")
        return None

    if configuration.location:
        source_root = source_map.resolve(configuration.location)
        if source_root is None:
            raise PackageNotFoundError(package.name)
        logger.info(f"  - Using sources of {package.name} from {source_root}")
    else:
        source_root = package_root

    backend = backend_for(configuration.build_system)
    toolchain = resolve_toolchain(inputs, discovery, package_root, source_root, build_root)
    return Builder(
        package_name=package.name,
        package_root=os.fspath(package_root),
        source_root=os.fspath(source_root),
        build_root=os.fspath(build_root),
        build_products=build_products_root(inputs, build_root, source_root),
        configuration=configuration,
        toolchain=toolchain,
        backend=backend,
        runner=runner,
        inputs=inputs,
    )


__all__ = [
    "BACKENDS",
    "Builder",
    "CMakeBackend",
    "CustomBackend",
    "MakeBackend",
    "XcodeBackend",
    "backend_for",
    "builder_for_package",
]
