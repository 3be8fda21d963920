"""Command line interface for neurolayout."""
