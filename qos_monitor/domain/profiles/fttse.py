"""FTTSE QoS profile.

Flexible Time-Triggered Switched Ethernet contracts guarantee a minimum
bandwidth and maximum response time and delay between a provider and a
consumer.
"""

from ..models import Direction
from . import Profile

FTTSE = Profile(
    id="FTTSE",
    directions={
        "bandwidth": Direction.MINIMUM,
        "responseTime": Direction.MAXIMUM,
        "delay": Direction.MAXIMUM,
    },
    glossary={
        "bandwidth": {
            "definition": "Guaranteed minimum throughput of the stream",
            "unit": "bit/s",
        },
        "responseTime": {
            "definition": "Guaranteed maximum time to answer a request",
            "unit": "ms",
        },
        "delay": {
            "definition": "Guaranteed maximum transmission delay",
            "unit": "ms",
        },
    },
)
