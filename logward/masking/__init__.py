"""Masking engine: pattern compilation, registries, resolution and the two-pass scan."""
