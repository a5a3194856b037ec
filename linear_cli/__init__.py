"""Command-line client for the Linear GraphQL API."""

__version__ = "0.1.0"
