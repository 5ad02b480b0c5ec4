"""Core infrastructure: paths and configuration."""

from .global_paths import GlobalPath

__all__ = ["GlobalPath"]
