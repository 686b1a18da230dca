"""Grid construction and maze file helpers."""
