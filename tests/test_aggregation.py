"""
Tests for aggregation utilities.
"""

import pytest

from qos_monitor.domain.utils.aggregation import group_by_parameter, mean_by_parameter


def test_group_by_parameter_preserves_sample_order():
    samples = [{"a": 1.0, "b": 9.0}, {"a": 2.0, "b": 8.0}, {"a": 3.0, "b": 7.0}]
    assert group_by_parameter(samples, ["b", "a"]) == {
        "b": [9.0, 8.0, 7.0],
        "a": [1.0, 2.0, 3.0],
    }


def test_group_by_parameter_missing_key_raises():
    with pytest.raises(KeyError):
        group_by_parameter([{"a": 1.0}, {"b": 2.0}], ["a"])


def test_mean_by_parameter_basic():
    """Test mean aggregation with simple values."""
    samples = [{"rt": 40.0, "bw": 100.0}, {"rt": 60.0, "bw": 80.0}, {"rt": 60.0, "bw": 90.0}]
    means = mean_by_parameter(samples, ["rt", "bw"])
    assert means["rt"] == pytest.approx(53.333, abs=1e-3)
    assert means["bw"] == pytest.approx(90.0)


def test_mean_by_parameter_only_requested_names():
    means = mean_by_parameter([{"a": 1.0, "b": 2.0}], ["a"])
    assert means == {"a": 1.0}
