"""
Intel HEX Reader Command-Line Interface
=======================================

This package provides the **ihexread** command-line tool, a Click-based
application for inspecting Intel HEX files and extracting memory images.
"""

__all__ = ["ihexread"]
