"""Command line interface for jobqueue."""
