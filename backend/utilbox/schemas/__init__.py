"""Pydantic request/response models (see schemas/api.py)."""
