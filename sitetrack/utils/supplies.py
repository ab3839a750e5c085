"""
Supply order workflow helpers: the system comments posted on status
changes and the detailed CSV export (one row per item).
"""
import csv
import io
from typing import Iterable, Optional

from sitetrack.models import SupplyComment, SupplyOrder

SYSTEM_AUTHOR = "Sistema"

STATUS_MESSAGES = {
    "approved": "Pedido aprovado. Iniciando separação.",
    "separating": "Loja iniciou a separação dos itens.",
    "delivering": "Materiais enviados para o canteiro.",
    "delivered": "Recebimento confirmado na obra.",
}

STATUS_LABELS = {
    "requested": "Solicitado",
    "approved": "Aprovado",
    "separating": "Em Separação",
    "delivering": "Em Trânsito",
    "delivered": "Entregue",
    "cancelled": "Cancelado",
}

EXPORT_HEADERS = [
    "ID Pedido", "Titulo", "Status", "Prioridade", "Solicitante",
    "Data", "Item", "Quantidade", "Unidade", "Verificado",
]


def status_comment(order: SupplyOrder, status: str) -> Optional[SupplyComment]:
    """System comment for a status change, or None when the status has no message."""
    message = STATUS_MESSAGES.get(status)
    if not message:
        return None
    return SupplyComment(order_id=order.id, content=message, created_by=SYSTEM_AUTHOR)


def toggle_item(order: SupplyOrder, item_id: str) -> dict:
    items = [dict(item) for item in (order.items or [])]
    for item in items:
        if str(item.get("id")) == item_id:
            item["checked"] = not item.get("checked", False)
            # Reassign so the JSON column is flagged dirty
            order.items = items
            return item
    raise ValueError(f"Item '{item_id}' not found in this order")


def export_orders_csv(orders: Iterable[SupplyOrder]) -> str:
    """UTF-8 BOM prefixed so spreadsheet apps detect the encoding."""
    sio = io.StringIO()
    writer = csv.writer(sio)
    writer.writerow(EXPORT_HEADERS)
    for order in orders:
        created = order.created_at.strftime("%d/%m/%Y") if order.created_at else ""
        for item in order.items or []:
            writer.writerow([
                order.id,
                order.title,
                STATUS_LABELS.get(order.status, order.status),
                order.priority,
                order.created_by,
                created,
                item.get("name", ""),
                item.get("quantity", ""),
                item.get("unit", ""),
                "Sim" if item.get("checked") else "Não",
            ])
    return "\ufeff" + sio.getvalue()
