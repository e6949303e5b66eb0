"""
Main entry point for running vorbiscomment as a module.
Allows: python -m vorbiscomment ...
"""
from .cli import main

if __name__ == "__main__":
    main()
