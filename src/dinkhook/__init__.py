"""Receiver for Dink RuneLite plugin webhook notifications."""

__version__ = "0.1.0"
