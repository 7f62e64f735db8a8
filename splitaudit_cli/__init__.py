"""
SplitAudit CLI

Command-line interface for split allocation and audit batches.

Usage:
    python -m splitaudit_cli allocate --amount 100 --rules rules.json
    python -m splitaudit_cli audit --count 25 --random-splits --out batch.json
    python -m splitaudit_cli verify batch.json
    python -m splitaudit_cli transfer --amount 100 --rules rules.json --rpc-url http://127.0.0.1:8545
"""

__version__ = "0.1.0"
