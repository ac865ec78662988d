"""ScriptCraft: round-trip designer backend for Unity editor scripts."""

__version__ = "0.1.0"
