"""streampatch package entrypoint and lightweight public API."""

from __future__ import annotations

import importlib
from typing import Any

__version__ = "0.3.0"
__license__ = "MIT"

_LAZY_EXPORTS = {
    "Config": ("streampatch.config", "Config"),
    "StreamSession": ("streampatch.streaming.session", "StreamSession"),
    "DiffBlockParser": ("streampatch.streaming.blocks", "DiffBlockParser"),
    "DocumentPatcher": ("streampatch.patching.patcher", "DocumentPatcher"),
    "TextDocument": ("streampatch.patching.document", "TextDocument"),
    "AskService": ("streampatch.app.ask_service", "AskService"),
}

__all__ = ["__version__", *_LAZY_EXPORTS]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    value = getattr(importlib.import_module(module_name), attr_name)
    globals()[name] = value
    return value
