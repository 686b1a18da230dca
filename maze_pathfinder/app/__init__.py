"""Run control for the search engine (Qt timer-driven)."""
