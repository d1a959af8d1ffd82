"""Local and remote D1 database browsing behind one HTTP surface."""

__version__ = "0.1.0"
