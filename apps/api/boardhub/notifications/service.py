from __future__ import annotations

import structlog

from boardhub.entities import Identity, Notification
from boardhub.errors import NotFound
from boardhub.store import Store

log = structlog.get_logger()


async def get_notifications(store: Store, identity: Identity) -> list[Notification]:
  if identity.is_admin:
    return await store.list_notifications()
  return await store.notifications_for(identity.name)


async def mark_as_read(store: Store, notification_id: str, identity: Identity) -> None:
  n = await store.get_notification(notification_id)
  if n is None:
    raise NotFound("Notification not found")
  # Someone else's notification is left untouched rather than rejected.
  if not (identity.is_admin or n.target_user == identity.name):
    return
  if await store.mark_read(n.id):
    await store.commit()
    log.info("notification.read", id=n.id, actor=identity.name)


async def mark_all_as_read(store: Store, identity: Identity) -> int:
  target = None if identity.is_admin else identity.name
  count = await store.mark_all_read(target)
  await store.commit()
  log.info("notification.read_all", actor=identity.name, count=count)
  return count


async def get_unread_count(store: Store, identity: Identity) -> int:
  return await store.count_unread(None if identity.is_admin else identity.name)
