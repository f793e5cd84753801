"""
lycanstats CLI Entry Point

Allows running the package as a module: python -m lycanstats
"""

from lycanstats.cli import main

if __name__ == "__main__":
    main()
