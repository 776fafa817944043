"""Parameter codec: raw measurement maps to typed parameter sets.

Inbound rule and log messages carry their measurements as untyped
``{name: "value"}`` maps. The codec keeps exactly the parameters a QoS profile
requires, parses each into a finite float, and ignores any other keys.

Two entry points are provided:

- :func:`try_decode` returns a :class:`DecodeResult` whose ``failure`` tag
  callers can branch on without exception handling.
- :func:`decode` resolves the profile from the registry and raises
  :class:`~qos_monitor.errors.MissingParameter` or
  :class:`~qos_monitor.errors.InvalidParameter`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, cast

from ..errors import InvalidParameter, MissingParameter
from .models import ParameterSet
from .utils.validation import parse_float

logger = logging.getLogger(__name__)


class DecodeFailure(str, Enum):
    """Reason a raw parameter map could not be decoded."""

    MISSING = "missing"
    INVALID = "invalid"


@dataclass(frozen=True)
class DecodeResult:
    """
    Outcome of decoding a raw parameter map.

    Attributes
    ----------
    value : ParameterSet or None
        Decoded parameters when decoding succeeded
    failure : DecodeFailure or None
        Failure tag when decoding failed
    parameter : str or None
        Name of the offending parameter on failure
    raw_value : str or None
        Offending raw value for ``INVALID`` failures
    """

    value: Optional[ParameterSet] = None
    failure: Optional[DecodeFailure] = None
    parameter: Optional[str] = None
    raw_value: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> ParameterSet:
        """Return the decoded parameters or raise the matching error."""
        if self.failure is DecodeFailure.MISSING:
            raise MissingParameter(self.parameter or "")
        if self.failure is DecodeFailure.INVALID:
            raise InvalidParameter(self.parameter or "", self.raw_value)
        return cast(ParameterSet, self.value)


def try_decode(required: Iterable[str], raw: Mapping[str, object]) -> DecodeResult:
    """Decode ``raw`` into the ``required`` parameters, stopping at the first failure."""
    parameters: ParameterSet = {}
    for name in required:
        if name not in raw:
            logger.warning("codec.parameter_missing", extra={"parameter": name})
            return DecodeResult(failure=DecodeFailure.MISSING, parameter=name)
        value = parse_float(raw[name])
        if value is None:
            logger.warning(
                "codec.parameter_invalid",
                extra={"parameter": name, "value": str(raw[name])},
            )
            return DecodeResult(
                failure=DecodeFailure.INVALID,
                parameter=name,
                raw_value=str(raw[name]),
            )
        parameters[name] = value
    return DecodeResult(value=parameters)


def decode(profile_type: str, raw: Mapping[str, object]) -> ParameterSet:
    """Decode ``raw`` with the parameter set of the registered ``profile_type``.

    Raises
    ------
    UnknownProfile
        If no profile is registered under ``profile_type``.
    MissingParameter
        If a required parameter is absent.
    InvalidParameter
        If a required parameter is not a finite number.
    """
    from .profiles import get as get_profile  # noqa: PLC0415

    return get_profile(profile_type).decode(raw)
