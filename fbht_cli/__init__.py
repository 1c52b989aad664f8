"""
FBHT CLI

Command-line interface for committing files into a full binary hash tree
and verifying slices against a trusted root.

Usage:
    python -m fbht_cli commit ./data --key reports/q3.pdf --out commitment.json
    python -m fbht_cli eval @slice.txt
    python -m fbht_cli verify @slice.txt --root <hex>
    python -m fbht_cli config --init
"""

__version__ = "0.1.0"
