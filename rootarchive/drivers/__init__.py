"""Concrete implementations of the kernel ports."""
