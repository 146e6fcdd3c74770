"""snippetpick: browse snippet folders and insert files into the editor."""

__version__ = "0.1.0"

__all__ = ["__version__"]
