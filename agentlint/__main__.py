"""
Entry point for running agentlint as a module.

Usage:
    python -m agentlint scan ./src
    git diff | python -m agentlint scan --stdin
"""

import sys
from agentlint.cli import main

if __name__ == "__main__":
    sys.exit(main())
