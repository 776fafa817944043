"""Canonical domain data model for QoS rules, samples and verification.

These Pydantic models are the shapes the codec produces, the stores persist and
the verification engine consumes. They are storage-agnostic: the mapping to
MongoDB documents lives in :mod:`qos_monitor.storage.documents`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Typed output of the parameter codec: required parameter name -> value.
ParameterSet = Dict[str, float]

# Samples averaged in soft real-time mode when neither rule nor config says.
DEFAULT_SAMPLE_WINDOW = 10


class SystemIdentity(BaseModel):
    """Identity of one side of a service interaction.

    Attributes
    ----------
    name: str
        System name (case-sensitive).
    group: str
        System group (case-sensitive).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    group: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, text: str) -> "SystemIdentity":
        """Build an identity from ``NAME:GROUP`` notation."""
        name, sep, group = text.rpartition(":")
        if not sep:
            raise ValueError(f"expected NAME:GROUP, got {text!r}")
        return cls(name=name, group=group)

    def __str__(self) -> str:
        return f"{self.name}:{self.group}"


class Direction(str, Enum):
    """Which side of a threshold is a violation."""

    MINIMUM = "minimum"  # Guaranteed floor: violated when observed < threshold
    MAXIMUM = "maximum"  # Guaranteed ceiling: violated when observed > threshold

    def violated(self, threshold: float, observed: float) -> bool:
        """Return True when ``observed`` breaks the ``threshold``."""
        if self is Direction.MINIMUM:
            return observed < threshold
        return observed > threshold


class Rule(BaseModel):
    """SLA contract for one ordered (provider, consumer) pair.

    Attributes
    ----------
    profile_type: str
        Identifier of the QoS profile that verifies this rule (e.g., "FTTSE").
    provider: SystemIdentity
        Service provider.
    consumer: SystemIdentity
        Service consumer.
    thresholds: Dict[str, float]
        Agreed value per parameter.
    soft_real_time: bool
        When True the rule is verified against the mean of the last
        ``sample_window`` samples instead of the newest one.
    sample_window: int
        Number of samples averaged in soft real-time mode.
    """

    profile_type: str
    provider: SystemIdentity
    consumer: SystemIdentity
    thresholds: Dict[str, float] = Field(default_factory=dict)
    soft_real_time: bool = False
    sample_window: int = Field(DEFAULT_SAMPLE_WINDOW, ge=1)


class Log(BaseModel):
    """One measurement sample for an ordered identity pair.

    Attributes
    ----------
    profile_type: str
        Identifier of the QoS profile the sample was decoded with.
    timestamp: int
        Externally supplied wall-clock time in epoch milliseconds.
    parameters: Dict[str, float]
        Decoded parameter values.
    """

    model_config = ConfigDict(frozen=True)

    profile_type: str
    timestamp: int
    parameters: Dict[str, float] = Field(default_factory=dict)


class VerificationMode(str, Enum):
    """Verification mode chosen from the number of supplied samples."""

    HARD = "hard"
    SOFT = "soft"


class Violation(BaseModel):
    """A single parameter found in violation."""

    parameter: str
    threshold: float
    observed: float


class ViolationReport(BaseModel):
    """Outcome of verifying samples against a rule.

    An empty ``violations`` list means the samples comply with the rule.
    """

    profile_type: str
    mode: VerificationMode
    sample_count: int = Field(..., ge=1)
    violations: List[Violation] = Field(default_factory=list)
    provider: Optional[SystemIdentity] = None
    consumer: Optional[SystemIdentity] = None

    @property
    def compliant(self) -> bool:
        return not self.violations
