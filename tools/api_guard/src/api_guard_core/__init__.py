from .core import *  # noqa: F401,F403
from .core import TOOL_VERSION as __version__  # noqa: F401
