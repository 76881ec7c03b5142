"""uuid4-backed identifier provider."""

import uuid


class UuidIdentifierProvider:
    """
    Random identifiers, unique for the life of the process.

    Implements IdentifierProvider protocol.
    """

    def new_id(self) -> str:
        return str(uuid.uuid4())
