"""Core configuration for the HookLab API."""
