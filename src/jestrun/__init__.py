"""jestrun - run jest from your editor and jump to failures."""

__version__ = "0.1.0"
