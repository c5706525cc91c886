"""Debt negotiation backend for voice-agent telephony."""

__version__ = "1.0.0"
