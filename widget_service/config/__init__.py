"""
Configuration schema, resolution, and configuration sources.

Declares the recognized settings, resolves them against the environment into
an immutable AppConfig, and layers optional config-directory files underneath.
"""
