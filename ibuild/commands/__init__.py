from .build import build
from .version import version
