# src/tapstream/telemetry/logger/processors.py

"""
Custom structlog processors for tapstream.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
}

# Keys that only exist for rendering and never reach the final output.
INTERNAL_KEYS = ("_record", "_from_structlog")


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefix the event with an emoji matching its level."""
    level = logging.getLevelName(str(event_dict.get("level", "")).upper())
    emoji = LOG_EMOJIS.get(level) if isinstance(level, int) else None
    if emoji and isinstance(event_dict.get("event"), str):
        event_dict["event"] = f"{emoji} {event_dict['event']}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drop empty context values so console lines stay short."""
    empty: tuple[Any, ...] = (None, "")
    return {
        key: value
        for key, value in event_dict.items()
        if key in INTERNAL_KEYS or key == "event" or value not in empty
    }


# 🔼⚙️
