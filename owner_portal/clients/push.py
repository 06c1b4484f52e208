"""Push notification dispatch to portal users' mobile devices."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional, Protocol

import firebase_admin
from firebase_admin import credentials, messaging

from owner_portal.clients.sqlite_store import PortalStore

logger = logging.getLogger(__name__)


class PushNotifier(Protocol):
    async def notify(self, user_ids: Iterable[int], payload: Mapping[str, str]) -> None:
        ...


class LoggingPushNotifier:
    """Stand-in used when Firebase credentials are not configured."""

    async def notify(self, user_ids: Iterable[int], payload: Mapping[str, str]) -> None:
        logger.info(
            "Push notifications disabled; dropping %r for users %s",
            payload.get("title"),
            list(user_ids),
        )


class FirebasePushNotifier:
    """Send a multicast FCM message to every device registered by the users.

    Delivery is fire-and-forget: send failures are logged and never raised.
    Tokens that FCM reports as unregistered are removed from the store.
    """

    APP_NAME = "owner-portal"

    def __init__(
        self,
        store: PortalStore,
        *,
        credentials_path: Optional[str] = None,
        app: Optional[firebase_admin.App] = None,
    ) -> None:
        self._store = store
        self._credentials_path = credentials_path
        self._app = app

    def _firebase_app(self) -> firebase_admin.App:
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.APP_NAME)
            except ValueError:
                cert = credentials.Certificate(self._credentials_path)
                self._app = firebase_admin.initialize_app(cert, name=self.APP_NAME)
        return self._app

    async def notify(self, user_ids: Iterable[int], payload: Mapping[str, str]) -> None:
        ids = list(user_ids)
        tokens = self._store.list_fcm_tokens(ids)
        if not tokens:
            logger.info("No FCM tokens found for users %s", ids)
            return

        message = messaging.MulticastMessage(
            notification=messaging.Notification(
                title=payload.get("title"),
                body=payload.get("body"),
            ),
            tokens=tokens,
        )

        def _send() -> messaging.BatchResponse:
            return messaging.send_each_for_multicast(message, app=self._firebase_app())

        try:
            response = await asyncio.to_thread(_send)
        except Exception:  # noqa: BLE001 - delivery is best-effort
            logger.exception("Error sending FCM notification to users %s", ids)
            return

        logger.info(
            "FCM sent to %s devices, failed: %s",
            response.success_count,
            response.failure_count,
        )

        stale = [
            token
            for token, result in zip(tokens, response.responses)
            if not result.success
            and isinstance(result.exception, messaging.UnregisteredError)
        ]
        if stale:
            removed = self._store.delete_fcm_tokens(stale)
            logger.info("Deleted %s unregistered FCM tokens", removed)


__all__ = ["FirebasePushNotifier", "LoggingPushNotifier", "PushNotifier"]
