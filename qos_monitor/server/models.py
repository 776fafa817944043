"""Inbound message models for the QoS monitor.

The transport that delivers these messages (HTTP, event bus, ...) lives
outside this package; it only has to produce these shapes.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..domain.models import SystemIdentity


class AddRuleMessage(BaseModel):
    """Request to register (or replace) the rule for a provider/consumer pair.

    ``parameters`` holds the agreed thresholds as raw strings; they are decoded
    with the parameter set of ``profile_type``.
    """

    profile_type: str = Field(..., description="QoS profile identifier, e.g. FTTSE")
    provider: SystemIdentity
    consumer: SystemIdentity
    parameters: Dict[str, str] = Field(
        default_factory=dict,
        description="Raw threshold values keyed by parameter name.",
    )
    soft_real_time: bool = Field(
        False,
        description="Verify against the mean of several samples instead of the newest.",
    )
    sample_window: Optional[int] = Field(
        None,
        ge=1,
        description=(
            "Number of samples averaged in soft real-time mode. "
            "Defaults to the monitor's configured window."
        ),
    )


class LogMessage(BaseModel):
    """One measurement sample for a provider/consumer pair."""

    profile_type: str
    provider: SystemIdentity
    consumer: SystemIdentity
    timestamp: int = Field(..., description="Measurement time in epoch milliseconds")
    parameters: Dict[str, str] = Field(
        default_factory=dict,
        description="Raw measured values keyed by parameter name.",
    )
