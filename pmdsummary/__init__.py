"""PMD analysis and build-summary step for CI pipelines."""

__version__ = "0.3.0"
