"""Command line interface for nixplan."""
