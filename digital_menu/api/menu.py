"""Public menu endpoints: browsing, special offers and QR sharing"""

import io
from typing import List, Optional
from uuid import UUID

import qrcode
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from digital_menu.api.deps import get_menu_store, get_runtime
from digital_menu.schemas.menu import (
    CategoryResponse,
    MenuResponse,
    ShareLink,
    SpecialOfferResponse,
)
from digital_menu.state.menu_store import MenuStore

router = APIRouter()


def public_menu_url(request: Request) -> str:
    """URL customers open, from settings or derived from the request"""
    settings = get_runtime(request).settings
    if settings.public_menu_url:
        return settings.public_menu_url
    return str(request.url_for("get_menu"))


@router.get("", response_model=MenuResponse, name="get_menu")
async def get_menu(
    category: Optional[UUID] = None,
    store: MenuStore = Depends(get_menu_store),
):
    """Current menu grouped by category.

    Without a ``category`` query parameter the store's selected category
    applies.
    """
    category_id = category if category is not None else store.selected_category
    snapshot = store.snapshot
    return MenuResponse(
        categories=list(snapshot.categories),
        sections=snapshot.sections(category_id),
        selected_category=category_id,
        loading=store.loading,
        error=str(store.error) if store.error else None,
    )


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(store: MenuStore = Depends(get_menu_store)):
    """Categories in display order"""
    return list(store.categories)


@router.get("/specials", response_model=List[SpecialOfferResponse])
async def list_special_offers(store: MenuStore = Depends(get_menu_store)):
    """Menu items currently on special offer, with their discount"""
    return store.snapshot.special_offers()


@router.get("/share", response_model=ShareLink)
async def share_link(request: Request):
    """Public menu link and where to fetch its QR code"""
    return ShareLink(
        title=get_runtime(request).settings.restaurant_name,
        url=public_menu_url(request),
        qr_code_url=str(request.url_for("menu_qr_code")),
    )


@router.get("/qr.png", name="menu_qr_code")
async def menu_qr_code(request: Request):
    """PNG QR code pointing at the public menu"""
    img = qrcode.make(public_menu_url(request))
    buf = io.BytesIO()
    img.save(buf, "PNG")
    buf.seek(0)
    
    return StreamingResponse(
        buf,
        media_type="image/png",
        headers={"Content-Disposition": 'inline; filename="menu-qr-code.png"'},
    )
