"""Per-user settings, currently the Google Calendar connection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from google.oauth2.credentials import Credentials


@dataclass
class UserSettings:
    user_id: str
    google_calendar_connected: bool = False
    google_access_token: Optional[str] = None
    google_token_expiry: Optional[str] = None

    def token_expiry(self) -> Optional[datetime]:
        """Return the expiry as naive UTC, the form google-auth compares against."""

        if not self.google_token_expiry:
            return None
        expiry = datetime.fromisoformat(self.google_token_expiry.replace("Z", "+00:00"))
        if expiry.tzinfo is not None:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        return expiry

    def calendar_credentials(self) -> Optional[Credentials]:
        """Build access-token credentials, or ``None`` when not connected."""

        if not self.google_calendar_connected or not self.google_access_token:
            return None
        return Credentials(token=self.google_access_token, expiry=self.token_expiry())


__all__ = ["UserSettings"]
