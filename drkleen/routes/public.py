# drkleen/routes/public.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from drkleen.database import RowStore, get_store
from drkleen.services import content_service

router = APIRouter(tags=["Public Catalog"])


@router.get("/products-api", response_model=dict)
async def list_products(
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    min_price: Optional[float] = Query(default=None),
    max_price: Optional[float] = Query(default=None),
    sort_by: str = Query(default="id"),
    sort_order: str = Query(default="asc"),
    store: RowStore = Depends(get_store),
):
    """Shop listing with optional category, name search and price range"""
    rows = await content_service.search_products(
        store,
        category=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"data": rows}


@router.get("/services-api", response_model=dict)
async def list_services(store: RowStore = Depends(get_store)):
    return {"data": await content_service.list_services(store)}


@router.get("/banners-api", response_model=dict)
async def list_banners(store: RowStore = Depends(get_store)):
    return {"data": await content_service.list_banners(store)}


@router.get("/testimonials-api", response_model=dict)
async def list_testimonials(store: RowStore = Depends(get_store)):
    return {"data": await content_service.list_testimonials(store)}
