"""Descriptor distances and patch correlation."""
