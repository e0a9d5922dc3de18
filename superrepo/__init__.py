"""super: keep a super repository of git submodules in sync."""

__version__ = "0.1.0"
