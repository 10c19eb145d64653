"""Vote ledger service.

Each user owns three sets of resource ids: favorites, upvotes and downvotes.
Every resource carries a denormalized counter per set (favorites_nr,
upvotes_nr, downvotes_nr).

Mutation rules:
- add: INSERT ... ON CONFLICT DO NOTHING RETURNING; the counter is bumped
  only when a row came back, so repeating an add is a no-op.
- remove: DELETE ... RETURNING; the counter is decremented only when a row
  was actually deleted (and never below zero).
- The set mutation runs first and the counter update second, inside the same
  transaction, so both land or neither does. On a store without
  transactions a crash between the two statements would leave the counter
  off by one relative to the ledger.

The upvote and downvote axes are independent: adding a downvote does not
clear an existing upvote (and vice-versa).

Users are created lazily on their first ledger mutation.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Table, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from resourcehub.models import Resource, User, user_downvotes, user_favorites, user_upvotes
from resourcehub.schemas import UserVotes
from resourcehub.services.ranking import invalidate_popular_cache
from resourcehub.stores.postgres import get_session, insert_ignore

logger = logging.getLogger("uvicorn.error")


class LedgerKind(str, Enum):
    """Which per-user set a mutation targets."""

    FAVORITES = "favorites"
    UPVOTES = "upvotes"
    DOWNVOTES = "downvotes"


@dataclass(frozen=True)
class _Ledger:
    table: Table
    counter: InstrumentedAttribute[int]


_LEDGERS: dict[LedgerKind, _Ledger] = {
    LedgerKind.FAVORITES: _Ledger(user_favorites, Resource.favorites_nr),
    LedgerKind.UPVOTES: _Ledger(user_upvotes, Resource.upvotes_nr),
    LedgerKind.DOWNVOTES: _Ledger(user_downvotes, Resource.downvotes_nr),
}


async def _user_id(session: AsyncSession, email: str) -> int | None:
    result = await session.execute(select(User.id).where(User.email == email))
    return result.scalar_one_or_none()


async def _get_or_create_user_id(session: AsyncSession, email: str) -> int:
    await session.execute(insert_ignore(session, User.__table__).values(email=email))
    user_id = await _user_id(session, email)
    if user_id is None:
        raise RuntimeError(f"User row for {email} vanished right after insert")
    return user_id


async def _add(session: AsyncSession, kind: LedgerKind, user_id: int, resource_id: str) -> bool:
    ledger = _LEDGERS[kind]
    inserted = await session.execute(
        insert_ignore(session, ledger.table)
        .values(user_id=user_id, resource_id=resource_id)
        .returning(ledger.table.c.resource_id)
    )
    if inserted.first() is None:
        return False

    await session.execute(
        update(Resource)
        .where(Resource.id == resource_id)
        .values({ledger.counter: ledger.counter + 1})
    )
    return True


async def _remove(session: AsyncSession, kind: LedgerKind, user_id: int, resource_id: str) -> bool:
    ledger = _LEDGERS[kind]
    deleted = await session.execute(
        delete(ledger.table)
        .where(ledger.table.c.user_id == user_id)
        .where(ledger.table.c.resource_id == resource_id)
        .returning(ledger.table.c.resource_id)
    )
    if deleted.first() is None:
        return False

    await session.execute(
        update(Resource)
        .where(Resource.id == resource_id)
        .where(ledger.counter > 0)
        .values({ledger.counter: ledger.counter - 1})
    )
    return True


async def add_to_ledger(email: str, resource_id: str, kind: LedgerKind) -> bool:
    """Add a resource to one of the user's sets.

    Returns:
        True if the set changed (and the counter was incremented).
    """
    async with get_session() as session:
        user_id = await _get_or_create_user_id(session, email)
        changed = await _add(session, kind, user_id, resource_id)

    logger.info(f"Ledger add kind={kind.value} user={email} resource={resource_id} changed={changed}")
    if changed:
        await invalidate_popular_cache()
    return changed


async def remove_from_ledger(email: str, resource_id: str, kind: LedgerKind) -> bool:
    """Remove a resource from one of the user's sets.

    Returns:
        True if the set changed (and the counter was decremented).
    """
    async with get_session() as session:
        user_id = await _user_id(session, email)
        changed = user_id is not None and await _remove(session, kind, user_id, resource_id)

    logger.info(f"Ledger remove kind={kind.value} user={email} resource={resource_id} changed={changed}")
    if changed:
        await invalidate_popular_cache()
    return changed


async def add_upvote(email: str, resource_id: str) -> bool:
    """Upvote a resource (idempotent)."""
    return await add_to_ledger(email, resource_id, LedgerKind.UPVOTES)


async def remove_upvote(email: str, resource_id: str) -> bool:
    """Withdraw an upvote (no-op if absent)."""
    return await remove_from_ledger(email, resource_id, LedgerKind.UPVOTES)


async def add_downvote(email: str, resource_id: str) -> bool:
    """Downvote a resource (idempotent). An existing upvote is left in place."""
    return await add_to_ledger(email, resource_id, LedgerKind.DOWNVOTES)


async def remove_downvote(email: str, resource_id: str) -> bool:
    """Withdraw a downvote (no-op if absent)."""
    return await remove_from_ledger(email, resource_id, LedgerKind.DOWNVOTES)


async def add_favorite(email: str, resource_id: str) -> bool:
    """Mark a resource as favorite (idempotent)."""
    return await add_to_ledger(email, resource_id, LedgerKind.FAVORITES)


async def remove_favorite(email: str, resource_id: str) -> bool:
    """Unmark a favorite (no-op if absent)."""
    return await remove_from_ledger(email, resource_id, LedgerKind.FAVORITES)


async def _ledger_ids(session: AsyncSession, kind: LedgerKind, user_id: int) -> list[str]:
    table = _LEDGERS[kind].table
    result = await session.execute(
        select(table.c.resource_id)
        .where(table.c.user_id == user_id)
        .order_by(table.c.created_at, table.c.resource_id)
    )
    return list(result.scalars().all())


async def get_favorites(email: str) -> list[str] | None:
    """Get the user's favorite resource ids.

    Returns:
        The ids, or None if the user has no ledger yet.
    """
    async with get_session() as session:
        user_id = await _user_id(session, email)
        if user_id is None:
            return None
        return await _ledger_ids(session, LedgerKind.FAVORITES, user_id)


async def post_favorites(email: str, resource_ids: Sequence[str]) -> list[str]:
    """Create the user's ledger (if needed) and add ``resource_ids`` as favorites.

    Called with an empty list on first sign-in. Counters follow the same
    only-on-change rule as add_favorite().

    Returns:
        The user's favorite ids afterwards.
    """
    async with get_session() as session:
        user_id = await _get_or_create_user_id(session, email)
        added = [
            resource_id
            for resource_id in dict.fromkeys(resource_ids)
            if await _add(session, LedgerKind.FAVORITES, user_id, resource_id)
        ]
        favorites = await _ledger_ids(session, LedgerKind.FAVORITES, user_id)

    if added:
        await invalidate_popular_cache()
    return favorites


async def get_user_votes(email: str) -> UserVotes | None:
    """Get every set of the user's ledger, or None if the user has none."""
    async with get_session() as session:
        user_id = await _user_id(session, email)
        if user_id is None:
            return None
        return UserVotes(
            email=email,
            favorites=await _ledger_ids(session, LedgerKind.FAVORITES, user_id),
            upvotes=await _ledger_ids(session, LedgerKind.UPVOTES, user_id),
            downvotes=await _ledger_ids(session, LedgerKind.DOWNVOTES, user_id),
        )


async def upsert_user(
    email: str,
    name: str | None = None,
    image: str | None = None,
    github_id: str | None = None,
) -> User:
    """Create the user if needed and refresh the profile fields that were given."""
    async with get_session() as session:
        await _get_or_create_user_id(session, email)
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one()
        if name is not None:
            user.name = name
        if image is not None:
            user.image = image
        if github_id is not None:
            user.github_id = github_id
        await session.flush()
        return user
