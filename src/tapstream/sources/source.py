#
# src/tapstream/sources/source.py
#
"""
A raw source together with everything detectors need to judge it.
"""
from collections.abc import Mapping
from typing import Any

from attrs import define, evolve, field

from tapstream.sources.meta import SourceMeta, assemble_meta
from tapstream.sources.raw import RawSource, from_raw


@define(frozen=True, slots=True)
class Source:
    """
    The unit handed to detectors.

    ``meta`` is assembled once, when the Source is built, and never changes
    afterwards. ``config`` holds per-detector settings keyed by detector name.
    """
    raw: RawSource = field()
    merge: bool = field(default=False)
    config: Mapping[str, Mapping[str, Any]] = field(factory=dict)
    meta: SourceMeta = field(init=False)

    def __attrs_post_init__(self) -> None:
        object.__setattr__(self, "meta", assemble_meta(self.raw))

    @classmethod
    def coerce(
        cls,
        value: Any,
        merge: bool | None = None,
        config: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> "Source":
        """
        Wrap ``value`` in a Source.

        An existing Source is returned as is unless ``merge`` or ``config`` is
        given, in which case a copy carrying those settings (and the same
        meta) is returned.
        """
        if isinstance(value, cls):
            changes: dict[str, Any] = {}
            if merge is not None:
                changes["merge"] = merge
            if config is not None:
                changes["config"] = config
            if not changes:
                return value
            updated = evolve(value, **changes)
            object.__setattr__(updated, "meta", value.meta)
            return updated
        return cls(raw=from_raw(value), merge=bool(merge), config=config or {})

    def config_for(self, detector_name: str) -> Mapping[str, Any]:
        return self.config.get(detector_name, {})


# 🔼⚙️
