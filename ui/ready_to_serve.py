"""
Ready to Serve panel shared by the cashier and admin dashboards
"""
import threading
import flet as ft

from core.change_feed import change_feed, touches_status
from core.db import SessionLocal
from core.errors import OrderError, TransitionConflictError
from core.live_orders import LiveOrderList
from core.order_service import list_ready, transition, action_label
from core.order_views import elapsed_minutes, is_urgent, format_elapsed
from core.utils import show_toast
from models.order import READY, COMPLETED

# Elapsed-minute badges are recomputed this often without hitting the store
TICK_SECONDS = 30


class _Ticker:
    """Daemon loop re-rendering the panel until closed."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self):
        self._thread.start()
        return self

    def _run(self):
        while not self._stop.wait(self.interval):
            try:
                self.callback()
            except Exception as ex:
                print(f"Ready panel tick error: {ex}")
                break

    def close(self):
        self._stop.set()


def build_ready_panel(page: ft.Page, staff, feed=change_feed):
    """
    Build the Ready to Serve panel

    Args:
        page: Flet page object
        staff: StaffSession of the signed-in user
        feed: ChangeFeed to listen on

    Returns:
        ft.Container: panel; its live list and ticker are registered on staff
    """

    count_badge = ft.Text("0", color="white", size=12, weight="bold")
    orders_column = ft.Column(spacing=10, scroll=ft.ScrollMode.AUTO, expand=True)

    # ===================== CARD BUILDER =====================

    def build_order_card(order):
        minutes = elapsed_minutes(order)
        urgent = is_urgent(order)

        return ft.Card(
            content=ft.Container(
                content=ft.Column([
                    ft.Row([
                        ft.Column([
                            ft.Text(f"Order #{order.order_number}", weight="bold", size=15, color="black"),
                            ft.Text(f"Table {order.table_number} • {order.customer_name}", size=12, color="grey700"),
                        ], spacing=2),
                        ft.Row([
                            ft.Container(
                                content=ft.Text(format_elapsed(minutes), color="white", size=11),
                                bgcolor="red" if urgent else "grey600",
                                padding=5,
                                border_radius=5
                            ),
                            ft.Container(
                                content=ft.Text("Ready", color="white", size=11),
                                bgcolor="green",
                                padding=5,
                                border_radius=5
                            ),
                        ], spacing=5)
                    ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                    ft.Column([
                        ft.Text(f"{item.quantity}x {item.item_name}", size=13, color="black")
                        for item in order.items
                    ], spacing=2),
                    ft.Row([
                        ft.ElevatedButton(
                            action_label(READY, staff.role) or "Mark as Served",
                            icon=ft.Icons.CHECK_CIRCLE_OUTLINE,
                            on_click=lambda e, o=order: mark_as_served(o),
                            style=ft.ButtonStyle(padding=8, color="white", bgcolor="green600"),
                            height=35
                        )
                    ], alignment=ft.MainAxisAlignment.END)
                ], spacing=6),
                padding=10,
                bgcolor="#FFF1F0" if urgent else "white",
                border=ft.border.all(2, "red") if urgent else None,
                border_radius=12
            )
        )

    # ===================== RENDER =====================

    def render(orders):
        orders_column.controls.clear()
        count_badge.value = str(len(orders))
        if not orders:
            orders_column.controls.append(
                ft.Container(
                    content=ft.Column([
                        ft.Icon(ft.Icons.ROOM_SERVICE_OUTLINED, size=60, color="grey"),
                        ft.Text("No orders ready to serve", size=14, color="grey700"),
                    ], horizontal_alignment=ft.CrossAxisAlignment.CENTER),
                    padding=30,
                    alignment=ft.alignment.center
                )
            )
        else:
            for order in orders:
                orders_column.controls.append(build_order_card(order))
        page.update()

    def on_error(ex):
        show_toast(page, "Failed to load ready orders", "error")

    # ===================== ACTIONS =====================

    def mark_as_served(order):
        staff.touch()
        db = SessionLocal()
        try:
            transition(db, order.id, READY, COMPLETED, actor_role=staff.role, actor=staff.email, feed=feed)
            show_toast(page, "Order marked as served!")
        except TransitionConflictError:
            show_toast(page, "This order was already updated", "info")
            live.refresh()
        except OrderError as ex:
            show_toast(page, f"Failed to mark order as served: {ex}", "error")
        finally:
            db.close()

    # ===================== SUBSCRIBE =====================

    # Orders entering or leaving ready both change this list
    live = staff.register(LiveOrderList(
        feed, list_ready, render,
        predicate=touches_status(READY),
        on_error=on_error,
        name="ready-to-serve",
    ))
    ticker = staff.register(_Ticker(TICK_SECONDS, live.rerender))

    panel = ft.Container(
        content=ft.Column([
            ft.Row([
                ft.Text("🍽️ Ready to Serve", size=18, weight="bold", color="black"),
                ft.Container(content=count_badge, bgcolor="green", padding=6, border_radius=10),
            ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
            orders_column
        ], expand=True, spacing=10),
        padding=10,
        expand=True
    )

    live.start()
    ticker.start()
    return panel
