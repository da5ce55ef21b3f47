"""Core — models, configuration, discovery and the re-encode engine."""
