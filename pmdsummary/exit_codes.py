"""Process exit codes shared by all pmd-summary commands.

Usage errors exit with 2 from argparse before any command runs.
"""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERNAL_ERROR = 3
