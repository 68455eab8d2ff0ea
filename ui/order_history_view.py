"""
Today's orders tab for the admin dashboard
"""
import flet as ft

from core.change_feed import change_feed
from core.live_orders import LiveOrderList
from core.order_service import list_completed_today
from core.utils import show_toast, status_color
from ui.admin_constants import PAYMENT_LABELS


def build_order_history_tab(page: ft.Page, staff, feed=change_feed):
    """Every order created today, newest first; refetched on any order change."""
    order_column = ft.Column(spacing=10, scroll=ft.ScrollMode.AUTO, expand=True)

    def build_order_card(order):
        return ft.Card(
            content=ft.Container(
                content=ft.Column([
                    ft.Row([
                        ft.Text(f"Order #{order.order_number}", size=15, weight="bold", color="black"),
                        ft.Container(
                            content=ft.Text(order.status, color="white", size=11, weight="bold"),
                            bgcolor=status_color(order.status),
                            padding=ft.padding.symmetric(horizontal=8, vertical=4),
                            border_radius=5
                        )
                    ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                    ft.Text(
                        f"{order.customer_name} • Table {order.table_number} • {order.created_at.strftime('%H:%M')}",
                        size=11, color="grey700"
                    ),
                    ft.Row([
                        ft.Text(PAYMENT_LABELS.get(order.payment_mode, order.payment_mode), size=12, color="grey700"),
                        ft.Text(f"Total: ₹{order.total:.2f}", weight="bold", size=14, color="black"),
                    ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN)
                ], spacing=4),
                padding=12,
                bgcolor="white",
                border_radius=12
            )
        )

    def render(orders):
        order_column.controls.clear()
        if not orders:
            order_column.controls.append(
                ft.Container(
                    content=ft.Column([
                        ft.Icon(ft.Icons.RECEIPT_LONG_OUTLINED, size=80, color="grey"),
                        ft.Text("No orders today", size=18, color="black", weight="bold"),
                    ], horizontal_alignment=ft.CrossAxisAlignment.CENTER, spacing=10),
                    padding=40,
                    alignment=ft.alignment.center
                )
            )
        for order in orders:
            order_column.controls.append(build_order_card(order))
        page.update()

    live = staff.register(LiveOrderList(
        feed, list_completed_today, render,
        on_error=lambda ex: show_toast(page, "Failed to load order history", "error"),
        name="order-history",
    ))
    live.start()

    return ft.Tab(
        text="Today's Orders",
        icon=ft.Icons.RECEIPT_LONG,
        content=ft.Container(content=order_column, expand=True, padding=10)
    )
