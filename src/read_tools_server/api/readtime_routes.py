"""
Reading-Time Routes

Renders the reading-time block (and optional read-aloud trigger) for a
published item.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from .dependencies import get_item_repository
from .models import ReadTimeOptions
from ..config import settings
from ..core.errors import ItemNotAccessible
from ..db import ItemRepository
from ..readtime import render_readtime

router = APIRouter(prefix="/items", tags=["readtime"])


def get_readtime_options(
    read_aloud: str = Query("no"),
    css_class: str = Query("readtime", alias="class"),
    wpm: int = Query(180),
    link_text: str = Query("Listen"),
    icon_class: str = Query("fas fa-headphones"),
) -> ReadTimeOptions:
    return ReadTimeOptions(
        read_aloud="yes" if read_aloud.strip().lower() == "yes" else "no",
        css_class=css_class,
        wpm=wpm,
        link_text=link_text,
        icon_class=icon_class,
    )


@router.get(
    "/{item_id}/readtime",
    response_class=HTMLResponse,
    summary="Reading-time markup for an item",
)
async def readtime(
    item_id: int,
    options: Annotated[ReadTimeOptions, Depends(get_readtime_options)],
    items: Annotated[ItemRepository, Depends(get_item_repository)],
) -> HTMLResponse:
    """
    Render the reading-time block of a published item.

    Raises
    ------
    ItemNotAccessible
        If the item is missing or not published.
    """
    identity = await items.get_identity(item_id)
    if identity is None or not identity.is_public:
        raise ItemNotAccessible()

    snapshot = await items.get_snapshot(item_id)
    if snapshot is None:
        raise ItemNotAccessible()

    markup = render_readtime(
        item_id,
        snapshot.body,
        read_aloud=options.read_aloud == "yes",
        css_class=options.css_class,
        wpm=options.wpm,
        link_text=options.link_text,
        icon_class=options.icon_class,
        locale=settings.locale,
    )
    return HTMLResponse(content=markup)
