"""
Identifier generation for stored vectors.
"""

import uuid


def generate_identifier() -> uuid.UUID:
    """Return a random 128-bit identifier (UUID version 4)."""
    return uuid.uuid4()
