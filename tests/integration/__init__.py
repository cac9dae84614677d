"""Integration tests for pacer-network.

Integration tests validate components working together:
- The public API against an in-memory portal
- File system artifacts (dockets, logs, network CSVs)

Run with: poetry run pytest tests/integration/ -v -s
"""
