"""
CLI command modules.
"""

from merklist_cli.commands import root, prove, verify

__all__ = ["root", "prove", "verify"]
