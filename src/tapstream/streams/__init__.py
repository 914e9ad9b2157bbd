#
# src/tapstream/streams/__init__.py
#
"""
Pull-based line streams and their lifecycle.
"""
from .process import ProcessStream
from .protocols import ExitStatus, Stream, StreamState

__all__ = [
    "ExitStatus",
    "ProcessStream",
    "Stream",
    "StreamState",
]

# 🔼⚙️
