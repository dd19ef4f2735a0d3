"""Scoped feature gates (user > chapter > role > global)."""
