"""QoS profile registry and base API.

A profile names the parameters a QoS contract is expressed in and, for each,
the direction in which an observation violates the agreed threshold. The
profile is the strategy behind both parameter decoding and verification, so
supporting a new kind of contract means registering a new :class:`Profile`
under its own identifier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ...errors import UnknownProfile
from ..codec import DecodeResult, try_decode
from ..models import Direction, ParameterSet, Rule, ViolationReport
from ..verification import evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    """QoS profile contract.

    Attributes
    ----------
    id: str
        Unique profile identifier carried by messages (e.g., "FTTSE").
    directions: Mapping[str, Direction]
        Required parameter name to violation direction. Iteration order is
        the order parameters are decoded and reported in.
    glossary: Dict[str, Dict[str, str]]
        Optional description and unit per parameter.
    """

    id: str
    directions: Mapping[str, Direction]
    glossary: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def required_parameters(self) -> Tuple[str, ...]:
        return tuple(self.directions)

    def try_decode(self, raw: Mapping[str, object]) -> DecodeResult:
        """Decode ``raw`` into this profile's parameter set as a typed result."""
        return try_decode(self.required_parameters, raw)

    def decode(self, raw: Mapping[str, object]) -> ParameterSet:
        """Decode ``raw`` into this profile's parameter set or raise."""
        return self.try_decode(raw).unwrap()

    def verify(self, rule: Rule, samples: Sequence[ParameterSet]) -> ViolationReport:
        """Verify ``samples`` against ``rule`` with this profile's directions."""
        return evaluate(self.id, self.directions, rule, samples)


_registry: Dict[str, Profile] = {}


def register(profile: Profile) -> None:
    """Register a profile by its `id`, replacing any previous registration."""
    _registry[profile.id] = profile
    logger.info(
        "Registered QoS profile: '%s' (parameters: %s)",
        profile.id,
        ", ".join(profile.required_parameters),
    )


def get(profile_id: str) -> Profile:
    """Retrieve a profile by `id`.

    Raises
    ------
    UnknownProfile
        If no profile is registered under the given identifier.
    """
    try:
        return _registry[profile_id]
    except KeyError:
        raise UnknownProfile(profile_id, sorted(_registry)) from None


def all_profiles() -> Iterable[Profile]:
    """Iterate over all registered profiles."""
    return _registry.values()


def log_profile_status() -> None:
    """Log information about registered profiles."""
    if not _registry:
        logger.warning(
            "No QoS profiles registered. Rule and log messages cannot be decoded."
        )
    else:
        logger.info(
            "QoS profiles loaded: %s\n  - Total profiles: %d",
            ", ".join(
                f"'{pid}' ({len(p.directions)} parameters)"
                for pid, p in _registry.items()
            ),
            len(_registry),
        )


def apply_enabled_profiles(enabled: Dict[str, bool]) -> Dict[str, List[str]]:
    """Apply configuration-based profile enable/disable filtering.

    Behavior:
    - When ``enabled`` is empty, no filtering is applied (all remain registered).
    - When non-empty, only profiles with ``enabled[id] is True`` are kept.

    Returns a dict with keys ``kept`` and ``disabled`` for diagnostics and tests.
    """
    if not enabled:
        return {"kept": sorted(_registry), "disabled": []}
    keep_ids = {pid for pid, on in enabled.items() if on}
    disabled: List[str] = []
    for pid in list(_registry):
        if pid not in keep_ids:
            disabled.append(pid)
            _registry.pop(pid, None)
    logger.info(
        "profiles.filter",
        extra={"kept": sorted(_registry), "disabled": sorted(disabled)},
    )
    return {"kept": sorted(_registry), "disabled": sorted(disabled)}


def reset_profiles() -> None:
    """Reset the registry to the built-in profiles.

    Clears the in-memory registry and registers the built-in profiles
    explicitly. Used by tests and by service startup to avoid cross-run
    contamination.
    """
    _registry.clear()
    from .fttse import FTTSE  # noqa: PLC0415

    register(FTTSE)


reset_profiles()
