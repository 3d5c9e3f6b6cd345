"""Track build artifact sizes across commits and report changes on GitHub."""

__version__ = "1.0.0"
