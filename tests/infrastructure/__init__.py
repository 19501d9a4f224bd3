"""
Unified test infrastructure for promptstruct.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the CLI in a subprocess
"""

from .file_utils import write, write_structure
from .cli_utils import run_cli, jload

__all__ = [
    "write",
    "write_structure",
    "run_cli",
    "jload",
]
