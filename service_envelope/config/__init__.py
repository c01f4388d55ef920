"""Configuration module — envelope settings."""

from service_envelope.config.settings import EnvelopeSettings

__all__ = [
    "EnvelopeSettings",
]
