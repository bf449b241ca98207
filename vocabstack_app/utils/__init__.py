"""Shared helpers: time handling, numeric rounding and session transactions."""
