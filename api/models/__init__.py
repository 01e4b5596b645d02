"""
Pydantic response models shared across routers.

This package exists to keep router modules slim and focused on HTTP concerns,
while centralizing data contracts in one place.
"""
