"""fieldinject - constructor field injection refactoring tool."""

__version__ = "0.1.0"
