"""Command line interface for the Card 51 engine."""
