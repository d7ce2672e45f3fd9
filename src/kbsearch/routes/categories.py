"""Category catalogue endpoint."""

from fastapi import APIRouter, Request

from kbsearch.corpus.schemas import CategoryList

router = APIRouter(tags=["categories"])


@router.get(
    "/categories",
    response_model=CategoryList,
    response_model_exclude_none=True,
    summary="List categories",
    description="Returns every category with a live count of published articles.",
)
async def list_categories(request: Request) -> CategoryList:
    """List the category catalogue.

    Returns:
        Categories in catalogue order, uncatalogued ones last.
    """
    return CategoryList(categories=request.app.state.store.categories())
