"""Shared pieces of the protocol adapter layer (one concern per module)."""
