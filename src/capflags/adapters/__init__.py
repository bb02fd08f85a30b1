"""Framework adapters for capflags."""
