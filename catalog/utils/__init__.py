"""Form validation and CLI output helpers."""
