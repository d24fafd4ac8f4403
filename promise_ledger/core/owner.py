"""
Owner resolution. Authentication lives outside this service; the caller's
gateway forwards the authenticated owner id in `X-Owner-Id`.
"""
from typing import Annotated

from fastapi import Header


def get_owner_id(
    x_owner_id: Annotated[str, Header(min_length=1, max_length=64, description="Owner id.")],
) -> str:
    return x_owner_id.strip()
