"""
Entry point for running the vvm CLI as a module.

Usage: python -m vyperkit [command] [options]
"""

from vyperkit.cli.parser import main

if __name__ == "__main__":
    main()
