import re
from .cli_logger import logger

# $#NAME# placeholders in manifest-supplied arguments
TOKEN_PATTERN = re.compile(r"\$#([A-Z0-9_]*?)#")


def apply_env_to_args(args, env):
    """Replace ``$#NAME#`` with ``env[NAME]`` in every argument.

    Tokens whose NAME is not a key of ``env`` are left untouched.
    """
    def _substitute(match):
        key = match.group(1)
        if key not in env:
            return match.group(0)
        logger.debug(f"Replacing {key} with {env[key]}")
        return env[key]

    return [TOKEN_PATTERN.sub(_substitute, arg) for arg in args]
