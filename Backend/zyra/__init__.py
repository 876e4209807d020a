"""Zyra chat booking backend."""
