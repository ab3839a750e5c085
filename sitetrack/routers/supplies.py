"""
Supplies router.

Material requests move through requested -> approved -> separating ->
delivering -> delivered (or cancelled). Each workflow step posts a system
comment on the order so the thread doubles as its history.
"""
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional

from sitetrack.database import commit_or_500, get_db
from sitetrack.models import SupplyComment, SupplyOrder
from sitetrack.schemas.supply import (
    SupplyComment as SupplyCommentSchema,
    SupplyCommentCreate,
    SupplyImportRequest,
    SupplyItem,
    SupplyOrder as SupplyOrderSchema,
    SupplyOrderCreate,
    SupplyOrderUpdate,
    SupplyStatusChange,
)
from sitetrack.utils import ai
from sitetrack.utils.access import ProjectAccess, require_staff
from sitetrack.utils.notifications import notify, preview
from sitetrack.utils.supplies import STATUS_LABELS, export_orders_csv, status_comment, toggle_item

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Supplies"])


def _get_order(db: Session, project_id: int, order_id: int) -> SupplyOrder:
    order = db.query(SupplyOrder).filter(
        SupplyOrder.id == order_id,
        SupplyOrder.project_id == project_id,
    ).first()
    if not order:
        raise HTTPException(status_code=404, detail="Supply order not found")
    return order


@router.get("/projects/{project_id}/supplies", response_model=List[SupplyOrderSchema])
def list_orders(
    status: Optional[str] = None,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    query = db.query(SupplyOrder).filter(SupplyOrder.project_id == ctx.project.id)
    if status:
        query = query.filter(SupplyOrder.status == status)
    return query.order_by(SupplyOrder.updated_at.desc()).all()


@router.get("/projects/{project_id}/supplies/export")
def export_orders(
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Every order item as one CSV row."""
    orders = (
        db.query(SupplyOrder)
        .filter(SupplyOrder.project_id == ctx.project.id)
        .order_by(SupplyOrder.created_at.desc())
        .all()
    )
    slug = "_".join(ctx.project.name.lower().split())
    filename = f"suprimentos_detalhado_{slug}_{date.today().isoformat()}.csv"
    return Response(
        content=export_orders_csv(orders),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/projects/{project_id}/supplies/import-preview", response_model=List[SupplyItem])
def import_preview(
    data: SupplyImportRequest,
    ctx: ProjectAccess = Depends(require_staff),
):
    """
    Parse a pasted material list with AI.

    Nothing is saved: the items come back with preview ids for the user to
    review before creating the order. An empty list means nothing could be
    read.
    """
    return ai.parse_supply_list(data.csv_content)


@router.post("/projects/{project_id}/supplies", response_model=SupplyOrderSchema)
def create_order(
    data: SupplyOrderCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    if not data.title.strip():
        raise HTTPException(status_code=400, detail="Order title cannot be empty")
    if not data.items:
        raise HTTPException(status_code=400, detail="An order needs at least one item")

    order = SupplyOrder(
        project_id=ctx.project.id,
        title=data.title.strip(),
        priority=data.priority,
        items=[item.model_dump() for item in data.items],
        created_by=ctx.user.email,
    )
    db.add(order)
    notify(db, ctx.project.id, f"Novo pedido de suprimentos: {preview(order.title)}", ctx.user.email)
    commit_or_500(db, "create supply order")
    db.refresh(order)
    return order


@router.put("/projects/{project_id}/supplies/{order_id}", response_model=SupplyOrderSchema)
def update_order(
    order_id: int,
    data: SupplyOrderUpdate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = _get_order(db, ctx.project.id, order_id)
    if data.title is not None:
        if not data.title.strip():
            raise HTTPException(status_code=400, detail="Order title cannot be empty")
        order.title = data.title.strip()
    if data.priority is not None:
        order.priority = data.priority
    if data.items is not None:
        order.items = [item.model_dump() for item in data.items]

    commit_or_500(db, "update supply order")
    db.refresh(order)
    return order


@router.post("/projects/{project_id}/supplies/{order_id}/status", response_model=SupplyOrderSchema)
def change_status(
    order_id: int,
    data: SupplyStatusChange,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = _get_order(db, ctx.project.id, order_id)
    previous = order.status
    order.status = data.status

    comment = status_comment(order, data.status)
    if comment is not None and previous != data.status:
        db.add(comment)
    if previous != data.status:
        label = STATUS_LABELS.get(data.status, data.status)
        notify(db, ctx.project.id, f"Pedido {preview(order.title)}: {label}", ctx.user.email)

    commit_or_500(db, "change supply order status")
    db.refresh(order)
    logger.info("Supply order %s: %s -> %s", order.id, previous, order.status)
    return order


@router.post("/projects/{project_id}/supplies/{order_id}/items/{item_id}/toggle", response_model=SupplyOrderSchema)
def toggle_item_check(
    order_id: int,
    item_id: str,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = _get_order(db, ctx.project.id, order_id)
    try:
        toggle_item(order, item_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    commit_or_500(db, "toggle supply item")
    db.refresh(order)
    return order


@router.post("/projects/{project_id}/supplies/{order_id}/comments", response_model=SupplyCommentSchema)
def add_comment(
    order_id: int,
    data: SupplyCommentCreate,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = _get_order(db, ctx.project.id, order_id)
    if not data.content.strip():
        raise HTTPException(status_code=400, detail="Comment cannot be empty")

    comment = SupplyComment(order_id=order.id, content=data.content, created_by=ctx.user.email)
    db.add(comment)
    commit_or_500(db, "add supply comment")
    db.refresh(comment)
    return comment


@router.delete("/projects/{project_id}/supplies/{order_id}")
def delete_order(
    order_id: int,
    ctx: ProjectAccess = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = _get_order(db, ctx.project.id, order_id)
    db.delete(order)
    commit_or_500(db, "delete supply order")
    return {"message": "Supply order deleted successfully"}
