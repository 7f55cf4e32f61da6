"""Blog post routes."""

from fastapi import APIRouter, Depends

from ...db.backend import TableBackend
from ...db.repositories import BlogPostRepository
from ...errors import NotFoundError
from ...models.blog import BlogPost
from ..dependencies import get_backend
from ..schemas import BlogPostIn

router = APIRouter(prefix="/blog", tags=["blog"])


def post_to_dict(post: BlogPost) -> dict:
    return {
        "id": post.id,
        **post.to_dict(),
        "created_at": post.created_at.isoformat() if post.created_at else None,
    }


@router.get("")
async def list_posts(backend: TableBackend = Depends(get_backend)):
    """List posts, newest first."""
    posts = await BlogPostRepository(backend).list_all()
    return {"posts": [post_to_dict(p) for p in posts]}


@router.post("", status_code=201)
async def create_post(body: BlogPostIn, backend: TableBackend = Depends(get_backend)):
    post = await BlogPostRepository(backend).create(body.to_post())
    return post_to_dict(post)


@router.get("/{post_id}")
async def get_post(post_id: str, backend: TableBackend = Depends(get_backend)):
    post = await BlogPostRepository(backend).get(post_id)
    if post is None:
        raise NotFoundError("Blog post", post_id)
    return post_to_dict(post)


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    body: BlogPostIn,
    backend: TableBackend = Depends(get_backend),
):
    post = body.to_post()
    post.id = post_id
    updated = await BlogPostRepository(backend).update(post)
    if updated is None:
        raise NotFoundError("Blog post", post_id)
    return post_to_dict(updated)


@router.delete("/{post_id}")
async def delete_post(post_id: str, backend: TableBackend = Depends(get_backend)):
    if not await BlogPostRepository(backend).delete(post_id):
        raise NotFoundError("Blog post", post_id)
    return {"deleted": post_id}
