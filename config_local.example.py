# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for everything else. Only these names are read.
"""

# Example: plain output even on a colour terminal
# COLOR = False

# Example: keep the legacy behaviour of never writing an empty list
# PERSIST_EMPTY = False
