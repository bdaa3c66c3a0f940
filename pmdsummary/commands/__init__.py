"""Command handlers for the pmd-summary CLI."""
