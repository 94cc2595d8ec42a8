#
# src/microtest/cli/__init__.py
#
"""
Command line interface for microtest.
"""
