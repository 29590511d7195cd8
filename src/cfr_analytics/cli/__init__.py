"""Command-line interface for cfr-analytics."""
