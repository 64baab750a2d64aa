"""Models that ship with ImageX and need no optional dependencies."""
