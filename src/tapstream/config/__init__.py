#
# config/__init__.py
#
"""
Configuration handling sub-package for tapstream.

Exports the loading function and core configuration model.
"""

# Export the main loading function from the loader module
from .loader import load_config

# Export the core configuration models from the models module
from .models import (
    DetectorsConfig,
    GlobalConfig,
    StreamConfig,
    TapstreamConfig,
)

__all__ = [
    "DetectorsConfig",
    "GlobalConfig",
    "StreamConfig",
    "TapstreamConfig",
    "load_config",
]

# 🔼⚙️
