#
# src/tapstream/sources/protocols.py
#
"""
Defines the Detector protocol and the records the registry keeps about it.
"""
from typing import Protocol, runtime_checkable

from attrs import define, field

from tapstream.sources.source import Source
from tapstream.streams.protocols import Stream

MIN_SCORE = 0.0
MAX_SCORE = 1.0


@runtime_checkable
class Detector(Protocol):
    """
    A strategy that can judge a source and turn it into a stream.
    """

    name: str

    def can_handle(self, source: Source) -> float:
        """
        Report how confident this detector is that it can handle ``source``.

        Returns:
            A score in [0.0, 1.0]; 0.0 means "cannot handle".
        """
        ...

    def make_stream(self, source: Source) -> Stream:
        """
        Produce a live stream for a source this detector was chosen for.
        """
        ...


@define(frozen=True, slots=True)
class DetectorRegistration:
    """A detector and the position it was registered at."""
    detector: Detector
    order: int

    @property
    def name(self) -> str:
        return getattr(self.detector, "name", type(self.detector).__name__)


@define(frozen=True, slots=True)
class Candidate:
    """A detector that scored a given source above zero."""
    registration: DetectorRegistration
    score: float = field()

    @property
    def detector(self) -> Detector:
        return self.registration.detector

    @property
    def name(self) -> str:
        return self.registration.name


# 🔼⚙️
