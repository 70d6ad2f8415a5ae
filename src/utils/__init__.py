"""Shared utilities for livestub."""
