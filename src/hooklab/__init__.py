"""HookLab AI: hook generation gated by credits and an on-chain subscription."""

__version__ = "0.1.0"
