"""Signed audit trail."""
