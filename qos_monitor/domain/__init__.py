"""Domain layer: data model, parameter codec, QoS profiles and verification."""
