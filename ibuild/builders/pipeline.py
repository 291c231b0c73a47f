import os
from ..cli_logger import logger
from ..errors import BuilderError, BuildStageError
from ..utils.file_manager import ensure_dir
from .metadata import install_metadata


class Builder:
    """Builds one package for every target architecture with one backend.

    The backend supplies the ``configure``/``make``/``install`` hooks and the
    ``merge`` step; everything else (the architecture loop, the
    already-built check, metadata installation) lives here.
    """

    def __init__(self, package_name, package_root, source_root, build_root, build_products,
                 configuration, toolchain, backend, runner, inputs):
        self.package_name = package_name
        # Root of the package that's building the library
        self.package_root = package_root
        # Root of the library to be built
        self.source_root = source_root
        self.build_root = build_root
        self.build_products = build_products
        self.configuration = configuration
        self.toolchain = toolchain
        self.backend = backend
        self.runner = runner
        self.inputs = inputs
        self.current_architecture = None

    @property
    def architectures(self):
        return self.toolchain.architectures

    @property
    def package_build_root(self):
        return os.path.join(self.build_root, self.package_name)

    def architecture_dirs(self, architecture):
        """(scratch, install) directories for one architecture."""
        output_for_arch = os.path.join(self.build_products, architecture)
        return os.path.join(output_for_arch, "configure"), os.path.join(output_for_arch, "build")

    def is_built(self, install_dir):
        return all(
            os.path.exists(os.path.join(install_dir, name))
            for name in self.configuration.outputs or ()
        )

    def _run_stage(self, stage, architecture, hook, *args):
        try:
            hook(self, *args)
        except BuilderError as e:
            logger.error(f"{stage} failed for {self.package_name} ({architecture}).")
            raise BuildStageError(self.package_name, architecture, stage, e) from e

    def build(self):
        """Run the whole pipeline; returns the architecture -> install directory map."""
        library_outputs = self.configuration.outputs
        if not library_outputs:
            logger.info(f"No library outputs for {self.package_name}. Skipping build.")
            return {}

        logger.info(f"Building package {self.package_name} with {self.backend.name}...")
        arch_outputs = {}
        for arch in self.architectures:
            scratch_dir, install_dir = self.architecture_dirs(arch)
            arch_outputs[arch] = install_dir

            # Don't build if already exists
            if self.is_built(install_dir):
                logger.info(f"Already built all libraries for architecture: {arch}.")
                continue

            self.current_architecture = arch
            logger.info(f"Configuring for architecture: {arch}")
            ensure_dir(scratch_dir)
            ensure_dir(install_dir)

            self._run_stage("configure", arch, self.backend.configure, arch, scratch_dir, install_dir)
            self._run_stage("make", arch, self.backend.make, scratch_dir)
            self._run_stage("install", arch, self.backend.install, scratch_dir, install_dir)
            logger.success(f"  - Installed {self.package_name} for {arch}.")

        if not arch_outputs:
            logger.warning(f"No architectures configured for {self.package_name}. Nothing to merge.")
            return arch_outputs

        # Headers and pkgconfig are taken from the first architecture only
        first_output = arch_outputs[self.architectures[0]]
        self._run_stage("metadata", self.architectures[0], self._install_metadata, first_output)

        universal = " ".join(self.architectures)
        for library_name in library_outputs:
            arch_map = [(arch, os.path.join(arch_outputs[arch], library_name)) for arch in self.architectures]
            for destination in (
                os.path.join(self.build_root, library_name),
                os.path.join(self.package_build_root, library_name),
            ):
                self._run_stage("merge", universal, self.backend.merge, arch_map, destination)

        logger.success(f"Built {self.package_name} for {universal}.")
        return arch_outputs

    @staticmethod
    def _install_metadata(builder, arch_output):
        install_metadata(arch_output, builder.build_root, builder.build_root, builder.package_root)
        install_metadata(
            arch_output,
            builder.package_build_root,
            builder.build_root,
            builder.package_root,
            auxiliary_files=builder.configuration.auxiliary_files,
            package_specific=True,
        )
