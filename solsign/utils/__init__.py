"""Encoding and validation helpers for solsign."""
