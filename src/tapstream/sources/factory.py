#
# src/tapstream/sources/factory.py
#
"""
Factory for building SourceRegistry instances.
"""
from collections.abc import Iterable

import structlog

from tapstream.config.models import StreamConfig
from tapstream.exceptions import ConfigurationError
from tapstream.sources.executable import ExecutableDetector
from tapstream.sources.registry import SourceRegistry

log = structlog.get_logger("sources.factory")

# As we add more detectors (e.g., file or raw-text sources), they will be added here.
DETECTOR_MAP = {
    "executable": ExecutableDetector,
}

DEFAULT_DETECTORS = ("executable",)


def build_registry(
    names: Iterable[str] = DEFAULT_DETECTORS,
    stream_config: StreamConfig | None = None,
) -> SourceRegistry:
    """
    Create a registry holding the named detectors, in the given order, and
    freeze it.
    """
    stream_config = stream_config or StreamConfig()
    registry = SourceRegistry()

    for name in names:
        detector_class = DETECTOR_MAP.get(name.lower())
        if not detector_class:
            log.error("Unsupported detector specified", detector=name)
            raise ConfigurationError(
                f"Unsupported detector: '{name}'. "
                f"Available detectors: {list(DETECTOR_MAP.keys())}"
            )

        log.debug("Instantiating detector", detector=name)
        try:
            detector = detector_class(
                encoding=stream_config.encoding,
                terminate_timeout=stream_config.terminate_timeout,
            )
        except Exception as e:
            log.error("Failed to instantiate detector", detector=name, error=str(e))
            raise ConfigurationError(f"Failed to initialize detector '{name}': {e}") from e
        registry.register(detector)

    return registry.freeze()


# 🔼⚙️
