"""Shared utilities for the EUDR API Client."""
