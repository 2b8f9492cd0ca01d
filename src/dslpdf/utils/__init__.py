"""Colour, bidirectional text and language helpers."""
