"""
Main entry point for Peng CLI

This allows running the CLI with: python -m peng
"""
from .cli import main

if __name__ == "__main__":
    main()
