"""Command-line interface for the EUDR API Client."""
