"""Read-state subpackage exports."""

from ntfy_cli.state.store import (
    get_last_read_time,
    get_state_key,
    load_state,
    save_state,
    set_last_read_time,
)

__all__ = [
    "get_state_key",
    "get_last_read_time",
    "set_last_read_time",
    "load_state",
    "save_state",
]
