# %%
import importlib.util
import pathlib
from typing import Any


PARENT_PATH = pathlib.Path(importlib.util.find_spec("ggstudio.util").origin).parent  # type: ignore

DISPLAY_MODES = ("widget", "html")

CONFIG: dict[str, Any] = {"display_as": "widget", "dev": False}


def configure(options: dict[str, Any] | None = None, **kwargs: Any) -> None:
    """
    Update global display options.

    Args:
        options: a dict of options, merged with any keyword arguments.
            `display_as` is "widget" (anywidget, needs a kernel) or "html"
            (standalone, static). `dev` enables verbose JS logging.
    """
    updates = {**(options or {}), **kwargs}
    for key, value in updates.items():
        if key not in CONFIG:
            raise ValueError(f"Unknown config option: {key}")
        if key == "display_as" and value not in DISPLAY_MODES:
            raise ValueError(f"display_as must be one of {DISPLAY_MODES}, got {value!r}")
    CONFIG.update(updates)


def deep_merge(dict1, dict2):
    """
    Recursively merge two dictionaries, returning a new dict.
    Values in dict2 overwrite values in dict1. If both values are dictionaries, recursively merge them.
    """
    if not isinstance(dict1, dict) or not isinstance(dict2, dict):
        return dict2
    merged = dict(dict1)
    for k, v in dict2.items():
        merged[k] = deep_merge(merged[k], v) if k in merged else v
    return merged
