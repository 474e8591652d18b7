"""Conflict ledger stored in GitHub issue comments."""
