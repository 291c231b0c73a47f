import shlex
from ..cli_logger import logger
from ..errors import ConfigurationError
from ..template import apply_env_to_args
from .merge import merge_universal


class CustomBackend:
    """Packages that bring their own configure/make/install command lines.

    Commands may use the toolchain placeholders plus ``$#ARCH#``,
    ``$#CONFIGURE_DIR#`` and ``$#PREFIX#`` for the architecture being built.
    """

    name = "custom commands"

    def _run(self, builder, stage, scratch_dir, architecture=None, install_dir=None):
        commands = builder.configuration.custom
        if commands is None:
            raise ConfigurationError(f"Package {builder.package_name} has no custom build commands.")
        command_line = getattr(commands, stage)
        if not command_line:
            logger.info(f"  - No custom {stage} command. Skipping.")
            return

        env = dict(builder.toolchain.env)
        env.update(commands.env)
        env["CONFIGURE_DIR"] = str(scratch_dir)
        if architecture:
            env["ARCH"] = architecture
        if install_dir:
            env["PREFIX"] = str(install_dir)
        argv = apply_env_to_args(shlex.split(command_line), env)
        builder.runner.run(argv[0], argv[1:], cwd=scratch_dir, env=env)

    def configure(self, builder, architecture, scratch_dir, install_dir):
        self._run(builder, "configure", scratch_dir, architecture, install_dir)

    def make(self, builder, scratch_dir):
        architecture = builder.current_architecture
        install_dir = builder.architecture_dirs(architecture)[1] if architecture else None
        self._run(builder, "make", scratch_dir, architecture, install_dir)

    def install(self, builder, scratch_dir, install_dir):
        self._run(builder, "install", scratch_dir, builder.current_architecture, install_dir)

    merge = staticmethod(merge_universal)
