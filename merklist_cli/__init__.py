"""
Merklist CLI

Command-line interface for building whitelist Merkle roots and proofs.

Usage:
    python -m merklist_cli root whitelist.txt
    python -m merklist_cli prove whitelist.txt 0x1111000000000000000000000000000000000000
    python -m merklist_cli verify 0x1111... --root 0x94a6... --proof 0x0808... --proof 0xf78d...
    python -m merklist_cli config --show
"""

__version__ = "0.1.0"
