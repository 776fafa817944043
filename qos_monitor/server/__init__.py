"""QoS monitor service facade, inbound message models and CLI."""
