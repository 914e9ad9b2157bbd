#
# src/tapstream/sources/registry.py
#
"""
Arbitrates between detectors competing for the same raw source.

Every registered detector scores the source; the highest score wins and the
earliest registration wins a tie. Registration happens during start-up; once
the registry is frozen it is read-only and safe to share between threads.
"""
from collections.abc import Iterator, Mapping
from typing import Any

import structlog

from tapstream.exceptions import DetectorError, NoMatchingSourceError, RegistryFrozenError
from tapstream.sources.protocols import (
    MAX_SCORE,
    MIN_SCORE,
    Candidate,
    Detector,
    DetectorRegistration,
)
from tapstream.sources.source import Source
from tapstream.streams.protocols import Stream
from tapstream.telemetry import StructLogger

log: StructLogger = structlog.get_logger("sources.registry")


class SourceRegistry:
    """Holds detectors in registration order and resolves sources against them."""

    def __init__(self) -> None:
        self._registrations: tuple[DetectorRegistration, ...] = ()
        self._frozen = False

    # --- Registration ---
    def register(self, detector: Detector) -> DetectorRegistration:
        """
        Append a detector. Registering the same instance twice is not
        prevented; callers must avoid it.
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {type(detector).__name__}: registry is frozen"
            )
        registration = DetectorRegistration(detector=detector, order=len(self._registrations))
        # Replace rather than mutate so readers always see a complete tuple.
        self._registrations = (*self._registrations, registration)
        log.debug("Detector registered", detector=registration.name, order=registration.order)
        return registration

    def freeze(self) -> "SourceRegistry":
        """End the registration phase."""
        self._frozen = True
        log.debug("Detector registry frozen", detectors=self.names)
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def registrations(self) -> tuple[DetectorRegistration, ...]:
        return self._registrations

    @property
    def names(self) -> list[str]:
        return [registration.name for registration in self._registrations]

    def __len__(self) -> int:
        return len(self._registrations)

    def __iter__(self) -> Iterator[Detector]:
        return (registration.detector for registration in self._registrations)

    # --- Detection ---
    def score_all(self, source: Source) -> list[tuple[DetectorRegistration, float]]:
        """Ask every detector for its score, including zero scores."""
        scores = []
        for registration in self._registrations:
            score = float(registration.detector.can_handle(source))
            if not MIN_SCORE <= score <= MAX_SCORE:
                log.error("Detector returned an out-of-range score", detector=registration.name, score=score)
                raise DetectorError(
                    f"Detector '{registration.name}' returned score {score}, "
                    f"expected a value in [{MIN_SCORE}, {MAX_SCORE}]"
                )
            scores.append((registration, score))
        return scores

    def detect(
        self,
        raw: Any,
        merge: bool | None = None,
        config: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> list[Candidate]:
        """Return every detector that scored ``raw`` above zero, in registration order."""
        source = Source.coerce(raw, merge=merge, config=config)
        candidates = [
            Candidate(registration=registration, score=score)
            for registration, score in self.score_all(source)
            if score > MIN_SCORE
        ]
        log.debug(
            "Detection complete",
            raw=str(source.raw),
            candidates={candidate.name: candidate.score for candidate in candidates},
        )
        return candidates

    def resolve(
        self,
        raw: Any,
        merge: bool | None = None,
        config: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> Candidate:
        """
        Pick the detector for ``raw``.

        Raises:
            NoMatchingSourceError: if no detector scored above zero.
        """
        source = Source.coerce(raw, merge=merge, config=config)
        best: Candidate | None = None
        for candidate in self.detect(source):
            # Strictly greater: on a tie the earlier registration stays.
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None:
            log.error("No detector can handle source", raw=str(source.raw), detectors=self.names)
            raise NoMatchingSourceError(source.raw, self.names)

        log.info("Source resolved", detector=best.name, score=best.score)
        return best

    def make_stream(
        self,
        raw: Any,
        merge: bool | None = None,
        config: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> Stream:
        """Resolve ``raw`` and let the winning detector build its stream."""
        source = Source.coerce(raw, merge=merge, config=config)
        candidate = self.resolve(source)
        return candidate.detector.make_stream(source)


# 🔼⚙️
