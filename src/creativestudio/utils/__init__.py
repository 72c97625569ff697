"""Utility helpers for creativestudio."""
