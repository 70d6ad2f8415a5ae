"""Observability helpers for livestub."""
