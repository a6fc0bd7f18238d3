"""In-flight registry rejecting concurrent duplicate syntheses."""

import contextlib
import hashlib
import json
from typing import Optional

from pydantic import BaseModel

from schemas import Language
from services.errors import DuplicateSynthesisError


def draft_key(draft: BaseModel, requester_id: str, base_image: Optional[str] = None,
              language: Optional[Language] = None) -> str:
    """Content hash identifying one synthesis request."""
    payload = json.dumps(
        {
            "kind": type(draft).__name__,
            "draft": draft.model_dump(mode="json"),
            "requester": requester_id,
            "base_image": base_image or "",
            "language": Language(language).value if language else "",
        },
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class InFlightRegistry:
    """
    Keys of the syntheses currently running.

    All access happens on the event loop thread, so a plain set is enough.
    """

    def __init__(self):
        self._keys = set()

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    @contextlib.asynccontextmanager
    async def claim(self, key: str):
        if key in self._keys:
            raise DuplicateSynthesisError("An identical synthesis is already in progress")
        self._keys.add(key)
        try:
            yield key
        finally:
            self._keys.discard(key)
