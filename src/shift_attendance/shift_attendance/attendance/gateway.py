from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import CheckAction
from .model import Timesheet


class AttendanceGateway(Protocol):
    """Attendance collaborator as seen from a station."""

    def list_timesheets(self, schedule_ids: Sequence[int]) -> Mapping[int, Timesheet]:
        raise NotImplementedError

    def submit(
        self,
        *,
        action: CheckAction,
        schedule_id: int,
        employee_id: int,
        station_token: str,
        verification: Mapping[str, Any],
    ) -> Timesheet:
        """Created (check-in) or updated (check-out) Timesheet.

        Raises IdentityRejectedError, StationInvalidError, WindowClosedError or
        InvalidTransitionError when the collaborator refuses.
        """

        raise NotImplementedError


class IdentityVerifier(Protocol):
    """Opaque biometric verifier: accept or reject."""

    def verify(self, *, employee_id: int, verification: Mapping[str, Any]) -> bool:
        raise NotImplementedError


def verification_image(verification: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not verification:
        return None
    image = verification.get("image_base64") or verification.get("imageBase64")
    return str(image) if image else None
