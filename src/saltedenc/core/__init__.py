"""Core package of saltedenc."""
