"""Command line interface for the narrator."""
