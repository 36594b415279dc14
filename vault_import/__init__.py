"""Credential CSV import pipeline.

tokenize -> analyze -> project -> commit. See ``vault_import.services``.
"""

__version__ = "0.1.0"
