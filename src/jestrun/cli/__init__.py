"""jestrun command-line interface."""
