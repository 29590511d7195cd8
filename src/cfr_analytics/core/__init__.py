"""Core coordination logic: errors, resilience, reconciliation, sequencing."""
