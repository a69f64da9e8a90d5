"""
Read-only Google Calendar access for busy-period lookup.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Tuple

import pytz
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from sqlalchemy.orm import Session

from .. import settings
from ..models import GoogleOAuthToken

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events.readonly",
]
CACHE_TTL_SECONDS = 15 * 60

# Shared across reader instances; readers are built per request
_event_cache: Dict[Tuple, Tuple[float, List[Dict[str, Any]]]] = {}


class CalendarUnavailableError(Exception):
    """The user's calendar cannot be read (not connected, or the API failed)."""


def to_rfc3339(moment: datetime, tz=None) -> str:
    """Naive scheduler-local datetimes are localized to ``tz`` (UTC when unset)."""
    if moment.tzinfo is None:
        moment = (tz or pytz.UTC).localize(moment)
    return moment.isoformat()


class GoogleCalendarReader:
    """
    Implements the calendar port against the user's primary Google calendar.
    Results are cached in-process for 15 minutes per user and window.
    """

    def __init__(self, db: Session, tz=None, cache_ttl: int = CACHE_TTL_SECONDS):
        self.db = db
        self.tz = tz
        self.cache_ttl = cache_ttl
        self._cache = _event_cache

    def _build_service(self, user_id: int):
        google_token = self.db.query(GoogleOAuthToken).filter(GoogleOAuthToken.user_id == user_id).first()
        if not google_token:
            raise CalendarUnavailableError(f"No Google OAuth token found for user {user_id}")

        creds = Credentials(
            token=google_token.access_token,
            refresh_token=google_token.refresh_token,
            token_uri=TOKEN_URI,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            scopes=SCOPES,
        )
        return build("calendar", "v3", credentials=creds, cache_discovery=False)

    def get_events(self, user_id: int, *, time_min: datetime, time_max: datetime,
                   max_results: int) -> List[Dict[str, Any]]:
        cache_key = (user_id, time_min, time_max, max_results)
        cached = self._cache.get(cache_key)
        if cached and time.monotonic() - cached[0] < self.cache_ttl:
            logger.debug(f"Calendar cache hit for user {user_id}")
            return cached[1]

        service = self._build_service(user_id)
        try:
            events_result = (
                service.events().list(
                    calendarId="primary",
                    timeMin=to_rfc3339(time_min, self.tz),
                    timeMax=to_rfc3339(time_max, self.tz),
                    maxResults=max_results,
                    singleEvents=True,
                    orderBy="startTime",
                ).execute()
            )
        except Exception as e:
            raise CalendarUnavailableError(f"Google Calendar request failed for user {user_id}: {e}") from e

        events = events_result.get("items", [])
        self._cache[cache_key] = (time.monotonic(), events)
        logger.debug(f"Fetched {len(events)} calendar events for user {user_id}")
        return events

    def clear_user_cache(self, user_id: int) -> int:
        keys = [key for key in self._cache if key[0] == user_id]
        for key in keys:
            del self._cache[key]
        return len(keys)
