"""Core layer — configuration, services, persistence and use cases."""
