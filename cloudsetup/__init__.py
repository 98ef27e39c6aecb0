"""Remote storage setup for a personal Linux workstation."""

__version__ = "0.1.0"
