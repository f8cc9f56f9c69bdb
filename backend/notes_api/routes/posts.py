"""
Notes API: Posts Proxy Route
============================

What:  GET /posts returns the first few posts of the upstream source as
       `{id, title}` objects.
"""

from typing import List

from fastapi import APIRouter, Depends

from notes_api.schemas.post import PostSummary
from notes_api.schemas.system import ErrorResponse
from notes_api.services.posts_client import PostsClient, get_posts_client

router = APIRouter(tags=["Posts"])


@router.get(
    "/posts",
    response_model=List[PostSummary],
    responses={
        500: {"description": "Upstream source failed", "model": ErrorResponse},
    },
    summary="Proxy the first posts from the upstream source",
)
async def list_posts(client: PostsClient = Depends(get_posts_client)) -> List[PostSummary]:
    return await client.fetch_posts()
