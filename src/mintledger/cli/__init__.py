"""Command-line interface for mintledger."""
