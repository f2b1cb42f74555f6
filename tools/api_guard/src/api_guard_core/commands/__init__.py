from .baselines import command_check, command_update
from .inspection import command_diff, command_list_targets, command_snapshot

__all__ = [
    "command_check",
    "command_diff",
    "command_list_targets",
    "command_snapshot",
    "command_update",
]
