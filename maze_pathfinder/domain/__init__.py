"""Framework-agnostic search algorithms and grid model."""
