"""Comments on resources. The number of comments feeds the popularity score."""

from sqlalchemy import select

from resourcehub.models import Comment
from resourcehub.services.ranking import invalidate_popular_cache
from resourcehub.stores.postgres import get_session


async def add_comment(resource_id: str, user_email: str, user_name: str, body: str) -> Comment:
    """Add a comment to a resource."""
    comment = Comment(
        resource_id=resource_id,
        user_email=user_email,
        user_name=user_name,
        body=body,
    )
    async with get_session() as session:
        session.add(comment)
        await session.flush()

    await invalidate_popular_cache()
    return comment


async def list_comments(resource_id: str) -> list[Comment]:
    """List a resource's comments, oldest first."""
    async with get_session() as session:
        result = await session.execute(
            select(Comment)
            .where(Comment.resource_id == resource_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return list(result.scalars().all())
