"""
Entry point for running the mmock-setup CLI as a module.

Usage: python -m mmock_setup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
