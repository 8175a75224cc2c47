"""Streaming chat-completion adapter with an automation tool-call loop."""

__version__ = "0.1.0"
