"""Command line interface for the TLS Protect Cloud provider."""
