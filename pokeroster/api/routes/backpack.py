"""
pokeroster.api.routes.backpack — Backpack (mochila) endpoints
==============================================================

Always scoped to the account in the token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy import Engine

from pokeroster.api.deps import get_current_actor, get_engine
from pokeroster.services import backpack_service
from pokeroster.services.access_policy import Actor

router = APIRouter(prefix="/mochila", tags=["backpack"])


# Clients written against the original API send the Portuguese keys
class ItemAdd(BaseModel):
    item_name: str | None = Field(None, validation_alias=AliasChoices("item_name", "item_nome"))
    quantity: int | str | None = Field(
        None, validation_alias=AliasChoices("quantity", "quantidade")
    )


class ItemQuantity(BaseModel):
    quantity: int | str | None = Field(
        None, validation_alias=AliasChoices("quantity", "quantidade")
    )


@router.get("")
def list_items(
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return [i.to_dict() for i in backpack_service.list_items(engine, actor, actor.account_id)]


@router.get("/item/{item_id}")
def get_item(
    item_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    return backpack_service.get_item(engine, actor, actor.account_id, item_id).to_dict()


@router.post("/item", status_code=201)
def add_item(
    body: ItemAdd,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    item = backpack_service.add_item(
        engine, actor, actor.account_id, item_name=body.item_name, quantity=body.quantity
    )
    return item.to_dict()


@router.put("/item/{item_id}")
def set_item_quantity(
    item_id: int,
    body: ItemQuantity,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    item = backpack_service.set_quantity(
        engine, actor, actor.account_id, item_id, quantity=body.quantity
    )
    if item is None:
        return {"message": "Item removed from the backpack."}
    return item.to_dict()


@router.delete("/item/{item_id}")
def delete_item(
    item_id: int,
    actor: Actor = Depends(get_current_actor),
    engine: Engine = Depends(get_engine),
):
    backpack_service.delete_item(engine, actor, actor.account_id, item_id)
    return {"message": "Item removed from the backpack."}
