import os
import subprocess
from ..cli_logger import logger
from ..errors import CommandError

def run_shell_command(command, env=None, cwd=None):
    """
    Executes a command and captures its output.

    Args:
        command (list): The command to execute as a list of strings.
        env (dict, optional): A dictionary of environment variables.
        cwd (str, optional): The working directory for the command.

    Returns:
        A tuple (stdout, stderr, return_code). A command that cannot be
        started at all reports a return code of -1.
    """
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env=env,
            check=False,
            cwd=cwd
        )
        return result.stdout, result.stderr, result.returncode

    except FileNotFoundError as e:
        logger.error(f"Command not found: {e.filename}")
        return "", str(e), -1
    except OSError as e:
        logger.error(f"Could not start {command[0]}: {e}")
        return "", str(e), -1


class CommandRunner:
    """Runs external tools for the builders.

    Every builder goes through one runner so tests can swap it for a mock.
    ``env`` passed to :meth:`run` extends ``base_env`` instead of replacing it,
    so tools keep seeing PATH and friends.
    """

    def __init__(self, base_env=None):
        self.base_env = dict(os.environ if base_env is None else base_env)

    def run(self, command, args, cwd=None, env=None):
        full_env = None
        if env:
            full_env = dict(self.base_env)
            full_env.update(env)
        elif self.base_env:
            full_env = self.base_env

        logger.info(f"  - Running {command} with arguments: {args}")
        stdout, stderr, returncode = run_shell_command(
            [command] + list(args), env=full_env, cwd=cwd
        )
        if returncode != 0:
            logger.error(f"{os.path.basename(command)} failed (Exit Code: {returncode}):")
            logger.command_output(stdout, stderr)
            raise CommandError(command, args, returncode, stdout, stderr)
        return stdout
