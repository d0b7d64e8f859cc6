"""Unit tests for the prompt server.

Each module under ``src`` has a dedicated test file. Tests build templates
in memory or in ``tmp_path`` and never touch the bundled prompt directory.

Usage:
    Run all unit tests::

        pytest tests/unit/
"""
