"""Hazard Relay: live earthquake/tsunami feed cache with chatbot and impact-prediction relays."""

__version__ = "0.1.0"
