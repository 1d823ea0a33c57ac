"""Source tree builder."""

from .build import Builder, build_file

__all__ = ["Builder", "build_file"]
