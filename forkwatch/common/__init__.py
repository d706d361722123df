"""Shared helpers for forkwatch."""
