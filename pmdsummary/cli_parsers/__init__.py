"""Argument parser builders for the pmd-summary CLI."""
