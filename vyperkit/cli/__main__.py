"""
Entry point for running the vvm CLI as a module.

Usage: python -m vyperkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
