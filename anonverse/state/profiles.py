"""
Profile lookup and owner edits.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from anonverse.errors import NotFound, ValidationError
from anonverse.models import Identity
from anonverse.services.data_service import DataService
from anonverse.state.access import Action, authorize
from anonverse.state.device_state import LocalDeviceState


class ProfileDirectory:
    def __init__(self, data: DataService, device: LocalDeviceState):
        self._data = data
        self._device = device

    async def fetch_profile(self, profile_id: UUID) -> Identity:
        rows = await self._data.select("profiles", filters={"id": profile_id}, limit=1)
        if not rows:
            raise NotFound(f"No profile {profile_id}")
        return Identity.model_validate(rows[0])

    async def update_profile(self, viewer: Optional[Identity], pen_name: str, bio: Optional[str]) -> Identity:
        """
        Edit the viewer's own profile.

        The pen name is trimmed and required; a blank bio is stored as null.
        """
        authorize(viewer, self._device, Action.EDIT_PROFILE)
        pen_name = (pen_name or "").strip()
        if not pen_name:
            raise ValidationError("A pen name is required")
        rows = await self._data.update(
            "profiles",
            {"id": viewer.id},
            {
                "pen_name": pen_name,
                "bio": (bio or "").strip() or None,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        if not rows:
            raise NotFound(f"No profile {viewer.id}")
        return Identity.model_validate(rows[0])
