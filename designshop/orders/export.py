"""
Export CSV des commandes (vue admin).

Une ligne par commande, tous les champs entre guillemets ; un guillemet dans
une valeur est doublé.
"""
import csv
import io
from typing import Iterable, List

from designshop.orders.config import CSV_EXPORT_HEADERS
from designshop.orders.models import Order


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _format_products(order: Order) -> str:
    parts = []
    for item in order.items:
        name = item.product.name if item.product else f"Product {item.product_id}"
        parts.append(f"{name} ({item.package_type}, Qty: {item.quantity})")
    return "; ".join(parts)


def _format_address(order: Order) -> str:
    parts = [
        order.shipping_street,
        order.shipping_city,
        order.shipping_state,
        order.shipping_zip_code,
        order.shipping_country,
    ]
    return ", ".join(part for part in parts if part)


def order_to_row(order: Order) -> List[str]:
    customer = order.customer
    return [
        order.order_number,
        (customer.name if customer else None) or order.shipping_full_name or "",
        (customer.email if customer else None) or order.shipping_email or "",
        order.status,
        f"{order.total:.2f}",
        str(len(order.items)),
        _format_products(order),
        _format_date(order.created_at),
        _format_date(order.updated_at),
        _format_address(order),
        order.shipping_phone or "",
    ]


def build_orders_csv(orders: Iterable[Order]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_EXPORT_HEADERS)
    for order in orders:
        writer.writerow(order_to_row(order))
    return buffer.getvalue().rstrip("\n")
