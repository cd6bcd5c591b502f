"""Core primitives: configuration, encoding, signing, and errors."""
