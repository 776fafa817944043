"""
QoS Monitor Python package.

This package hosts the QoS rule and telemetry store, the parameter codec for
QoS profiles, the SLA verification engine, and supporting utilities. See
README.md for usage.
"""

from .__version__ import __version__

__all__ = ["__version__"]
