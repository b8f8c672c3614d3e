"""
Entry point for running mmock-setup as a module.

Usage: python -m mmock_setup [command] [options]
"""

from mmock_setup.cli.parser import main

if __name__ == "__main__":
    main()
