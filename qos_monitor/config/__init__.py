"""Configuration models for the QoS monitor."""
