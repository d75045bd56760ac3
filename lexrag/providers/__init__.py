"""Concrete adapters for the interfaces in :mod:`lexrag.interfaces`."""
