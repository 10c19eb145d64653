"""Ranking service for the popular listing.

Ranking logic:
1. popularity = upvotes*Wu + downvotes*Wd + favorites*Wf + downloads*Wdl + comments*Wc
2. Sort by popularity DESC
3. Then by created_at DESC (newest wins ties)

The comment count is a LEFT JOIN on a grouped subquery, so resources without
comments contribute 0. Weights come from settings; their sign is policy.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, func, select

from resourcehub.models import Comment, Resource
from resourcehub.schemas import PopularResource, ResourceOut
from resourcehub.services.pagination import paginate, resolve_page_size
from resourcehub.settings import Settings, get_settings
from resourcehub.stores.postgres import get_session
from resourcehub.stores.redis import (
    clear_popular_cache,
    get_popular_page_cache,
    set_popular_page_cache,
)

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class PopularityWeights:
    """Weights of the popularity score."""

    upvotes: float = 1.0
    downvotes: float = -1.0
    favorites: float = 2.0
    downloads: float = 0.5
    comments: float = 1.0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PopularityWeights":
        settings = settings or get_settings()
        return cls(
            upvotes=settings.popularity_weight_upvotes,
            downvotes=settings.popularity_weight_downvotes,
            favorites=settings.popularity_weight_favorites,
            downloads=settings.popularity_weight_downloads,
            comments=settings.popularity_weight_comments,
        )


def compute_popularity(
    upvotes_nr: int,
    downvotes_nr: int,
    favorites_nr: int,
    downloads_nr: int,
    comment_count: int,
    weights: PopularityWeights,
) -> float:
    """Compute the popularity score in Python.

    Same formula as popularity_expression(); used where a score is needed
    outside of a query.
    """
    return (
        upvotes_nr * weights.upvotes
        + downvotes_nr * weights.downvotes
        + favorites_nr * weights.favorites
        + downloads_nr * weights.downloads
        + comment_count * weights.comments
    )


def popularity_expression(
    weights: PopularityWeights,
    comment_count: ColumnElement[int],
) -> ColumnElement[float]:
    """SQL expression for the popularity score of a Resource row."""
    return (
        Resource.upvotes_nr * weights.upvotes
        + Resource.downvotes_nr * weights.downvotes
        + Resource.favorites_nr * weights.favorites
        + Resource.downloads_nr * weights.downloads
        + comment_count * weights.comments
    )


def build_popular_query(weights: PopularityWeights) -> Select:
    """Build the (unpaginated) popularity-ordered query.

    Rows are (Resource, comment_count, popularity).
    """
    comment_counts = (
        select(Comment.resource_id, func.count(Comment.id).label("comment_count"))
        .group_by(Comment.resource_id)
        .subquery()
    )
    comment_count = func.coalesce(comment_counts.c.comment_count, 0)
    popularity = popularity_expression(weights, comment_count).label("popularity")

    return (
        select(Resource, comment_count.label("comment_count"), popularity)
        .outerjoin(comment_counts, comment_counts.c.resource_id == Resource.id)
        .order_by(popularity.desc(), Resource.created_at.desc(), Resource.id.desc())
    )


async def list_popular(
    page: int = 0,
    page_size: int | None = None,
    weights: PopularityWeights | None = None,
    use_cache: bool = True,
) -> list[PopularResource]:
    """Get one page of resources ranked by popularity.

    Args:
        page: Zero-indexed page number.
        page_size: Override for the configured page size.
        weights: Override for the configured weights (disables the cache).
        use_cache: Whether to use the short-lived Redis page cache.

    Returns:
        PopularResource list, highest score first.
    """
    settings = get_settings()
    size = resolve_page_size(page_size)
    use_cache = use_cache and weights is None and settings.popular_cache_ttl > 0
    weights = weights or PopularityWeights.from_settings(settings)

    if use_cache:
        try:
            cached = await get_popular_page_cache(page, size)
            if cached is not None:
                return [PopularResource.model_validate(item) for item in cached]
        except Exception as e:
            logger.warning(f"Redis cache read failed: {e}")

    async with get_session() as session:
        result = await session.execute(paginate(build_popular_query(weights), page, size))
        rows = result.all()

    ranked = [
        PopularResource(
            **ResourceOut.model_validate(resource).model_dump(),
            comment_count=int(comment_count),
            popularity=float(popularity),
        )
        for resource, comment_count, popularity in rows
    ]

    if use_cache:
        try:
            await set_popular_page_cache(
                page,
                size,
                [r.model_dump(mode="json") for r in ranked],
                settings.popular_cache_ttl,
            )
        except Exception as e:
            logger.warning(f"Redis cache write failed: {e}")

    return ranked


async def invalidate_popular_cache() -> None:
    """Drop cached popular pages after a change to counters, comments or resources.

    Without Redis there is nothing cached, so this is a no-op. Other Redis
    failures are logged; the cached pages then expire on their TTL.
    """
    try:
        await clear_popular_cache()
    except RuntimeError:
        return
    except Exception as e:
        logger.warning(f"Redis cache invalidation failed: {e}")
