"""Core session handling and error types."""
