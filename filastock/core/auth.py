from typing import Optional

from fastapi import Header, HTTPException, status


async def current_owner_id(x_owner_id: Optional[str] = Header(None, alias="X-Owner-Id")) -> str:
    """Owner id as asserted by the upstream identity provider.

    Authentication happens before requests reach this service; the value is
    trusted as-is.
    """
    owner_id = (x_owner_id or "").strip()
    if not owner_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing owner id")
    return owner_id
