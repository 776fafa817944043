"""
Sample aggregation utilities for soft real-time verification.

Collapses several decoded samples into one value per parameter so the same
directional comparison used for a single sample can be applied to the mean.
"""

import logging
import statistics
from typing import Dict, Iterable, List, Mapping, Sequence

logger = logging.getLogger(__name__)


def group_by_parameter(
    samples: Sequence[Mapping[str, float]], parameters: Iterable[str]
) -> Dict[str, List[float]]:
    """
    Collect each parameter's values across samples.

    Parameters
    ----------
    samples : Sequence[Mapping[str, float]]
        Decoded samples, each mapping parameter name to value
    parameters : Iterable[str]
        Parameter names to collect, in output order

    Returns
    -------
    Dict[str, List[float]]
        Parameter name to the list of its values, one per sample

    Raises
    ------
    KeyError
        If a sample lacks one of the requested parameters

    Examples
    --------
    >>> group_by_parameter([{"a": 1.0, "b": 2.0}, {"a": 3.0, "b": 4.0}], ["a"])
    {'a': [1.0, 3.0]}
    """
    return {name: [sample[name] for sample in samples] for name in parameters}


def mean_by_parameter(
    samples: Sequence[Mapping[str, float]], parameters: Iterable[str]
) -> Dict[str, float]:
    """
    Compute the arithmetic mean of each parameter across samples.

    Examples
    --------
    >>> mean_by_parameter([{"rt": 40.0}, {"rt": 60.0}, {"rt": 60.0}], ["rt"])
    {'rt': 53.333333333333336}
    """
    grouped = group_by_parameter(samples, parameters)
    means = {name: statistics.fmean(values) for name, values in grouped.items()}
    logger.debug(
        "aggregation.mean",
        extra={"sample_count": len(samples), "parameters": sorted(means)},
    )
    return means
