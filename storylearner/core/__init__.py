"""Core token models, validation, fallback and pipeline."""
