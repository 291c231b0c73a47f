import click


class BuilderError(click.ClickException):
    """Base class for every failure that aborts a package build."""


class ConfigurationError(BuilderError):
    pass


class PackageNotFoundError(ConfigurationError):
    def __init__(self, package_name):
        self.package_name = package_name
        super().__init__(
            f"Builder could not be created, because the package to build ({package_name}) was not found."
        )


class ToolchainError(BuilderError):
    pass


class FileSystemError(BuilderError):
    pass


class CommandError(BuilderError):
    """An external command exited with a non-zero status."""

    def __init__(self, command, args, returncode, stdout="", stderr=""):
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command '{command}' with arguments {self.args_list} failed (Exit Code: {returncode})"
        )


class BuildStageError(BuilderError):
    """A backend hook failed; carries where in the pipeline it happened."""

    def __init__(self, package_name, architecture, stage, cause):
        self.package_name = package_name
        self.architecture = architecture
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed for {package_name} ({architecture}): {cause.message}")
