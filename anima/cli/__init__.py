"""Command-line interface for anima."""
