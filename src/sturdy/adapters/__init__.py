"""Concrete implementations of the engine's ports, and the engine itself."""
