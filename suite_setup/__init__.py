"""Suite Setup — host-side installer and lifecycle manager for the on-prem suite."""

__version__ = "0.1.0"
