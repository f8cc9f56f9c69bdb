"""
Notes API: Upstream Post Schema
===============================

What:  The trimmed-down post returned by GET /posts.
How:   Upstream items are validated into PostSummary; every field other than
       `id` and `title` is dropped.
"""

from pydantic import BaseModel, Field


class PostSummary(BaseModel):
    id: int = Field(description="Post identifier from the upstream source")
    title: str = Field(description="Post title from the upstream source")

    model_config = {"extra": "ignore"}
