"""demosync: carry upstream changes into a demo codebase, keeping its protected blocks."""

__version__ = "0.3.0"
