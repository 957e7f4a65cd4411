"""Article rendering endpoints."""

from fastapi import APIRouter

from richdoc.ingestion import RenderOptions, render_article, render_payload
from richdoc.references import index_categories
from richdoc.schemas.rendering import RenderResult
from richdoc.utils.logging_config import get_logger
from server.models import ErrorResponse, RenderRequest

logger = get_logger(__name__)

router = APIRouter()

COMMON_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Article not found"},
    422: {"model": ErrorResponse, "description": "Payload is not a rich-text document"},
    502: {"model": ErrorResponse, "description": "Content store request failed"},
    503: {"model": ErrorResponse, "description": "Content store is not configured"},
}


@router.get("/api/articles/{category}/{slug}", response_model=RenderResult, responses=COMMON_RESPONSES)
async def get_article(category: str, slug: str, include_toc: bool = True, include_anchors: bool = False) -> RenderResult:
    """Fetch an article from the content store and return its rendered form.

    **Path Parameters**
    - **category** (`str`): category slug
    - **slug** (`str`): article slug

    **Query Parameters**
    - **include_toc** (`bool`, optional): include a contents list in the Markdown
    - **include_anchors** (`bool`, optional): keep heading anchors in the Markdown
    """
    logger.info("Rendering article request", extra={"category": category, "slug": slug})
    options = RenderOptions(include_toc=include_toc, include_anchors=include_anchors)
    return await render_article(category, slug, options=options)


@router.post("/api/render", response_model=RenderResult, responses=COMMON_RESPONSES)
async def post_render(render_request: RenderRequest) -> RenderResult:
    """Render a rich-text document supplied in the request body."""
    options = RenderOptions(
        include_toc=render_request.include_toc,
        include_anchors=render_request.include_anchors,
    )
    return render_payload(
        render_request.document,
        index_categories(render_request.categories),
        title=render_request.title,
        options=options,
    )
