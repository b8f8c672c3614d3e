"""
mmock-setup - install and verify the mmock HTTP mock server in CI runners.
"""

__version__ = "0.1.0"
