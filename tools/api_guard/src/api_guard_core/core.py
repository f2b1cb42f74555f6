from __future__ import annotations

from ._core_base import *  # noqa: F401,F403
from ._core_canonical import *  # noqa: F401,F403
from ._core_models import *  # noqa: F401,F403
from ._core_symbols import *  # noqa: F401,F403
from ._core_export import *  # noqa: F401,F403
from ._core_baseline import *  # noqa: F401,F403
from ._core_compare import *  # noqa: F401,F403
from ._core_config import *  # noqa: F401,F403
from ._core_orchestration import *  # noqa: F401,F403
