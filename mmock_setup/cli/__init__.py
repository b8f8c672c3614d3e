"""
Command-line interface for mmock-setup.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
