"""Static configuration constants."""
