"""
Shared utilities for QoS profiles and the verification engine.

Modules
-------
validation
    Float validation and parsing of raw measurement strings
aggregation
    Per-parameter aggregation of samples for soft real-time verification
"""

__all__ = []
