"""
Kitchen Portal: every active order, newest first, with one action per status
"""
import flet as ft

from core.change_feed import change_feed
from core.db import SessionLocal
from core.errors import OrderError, TransitionConflictError
from core.live_orders import LiveOrderList
from core.order_service import list_active, advance, action_label
from core.order_views import elapsed_minutes, format_elapsed, status_counts, filter_by_status
from core.utils import show_toast, status_color
from models.order import PENDING, COOKING, READY
from ui.admin_constants import BRAND_GRADIENT

TABS = ["all", PENDING, COOKING, READY]


def kitchen_view(page: ft.Page, staff, feed=change_feed):
    page.title = "Kitchen Portal - TablePay"

    if staff.role not in ("kitchen", "admin"):
        show_toast(page, "Access denied. Kitchen staff only.", "error")
        page.go("/login")
        return

    selected = {"tab": "all"}
    count_texts = {status: ft.Text("0", size=22, weight="bold", color="black") for status in (PENDING, COOKING, READY)}
    orders_grid = ft.GridView(
        max_extent=420,
        child_aspect_ratio=1.4,
        spacing=10,
        run_spacing=10,
        expand=True
    )

    # ===================== CARD BUILDER =====================

    def build_order_card(order):
        label = action_label(order.status, staff.role)
        return ft.Card(
            content=ft.Container(
                content=ft.Column([
                    ft.Row([
                        ft.Text(f"Table {order.table_number}", weight="bold", size=16, color="black"),
                        ft.Container(
                            content=ft.Text(order.status, color="white", size=12),
                            bgcolor=status_color(order.status),
                            padding=5,
                            border_radius=5
                        )
                    ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                    ft.Row([
                        ft.Icon(ft.Icons.ACCESS_TIME, size=14, color="grey700"),
                        ft.Text(f"#{order.order_number} • {format_elapsed(elapsed_minutes(order))}", size=12, color="grey700"),
                    ], spacing=4),
                    ft.Divider(height=1),
                    ft.Column([
                        ft.Text(f"• {item.item_name} x{item.quantity}", size=13, color="black")
                        for item in order.items
                    ], spacing=2, scroll=ft.ScrollMode.AUTO, expand=True),
                    ft.Row([
                        ft.ElevatedButton(
                            label,
                            on_click=lambda e, o=order: advance_order(o),
                            style=ft.ButtonStyle(padding=8, color="white", bgcolor="#FF6B35"),
                            height=35
                        )
                    ], alignment=ft.MainAxisAlignment.END) if label else ft.Container()
                ], spacing=6),
                padding=12,
                bgcolor="white",
                border_radius=12
            )
        )

    # ===================== RENDER =====================

    def render(orders=None):
        orders = live.orders if orders is None else orders
        for status, count in status_counts(orders).items():
            count_texts[status].value = str(count)

        orders_grid.controls.clear()
        visible = filter_by_status(orders, selected["tab"])
        if not visible:
            orders_grid.controls.append(
                ft.Container(
                    content=ft.Text("No orders here", size=14, color="grey700"),
                    alignment=ft.alignment.center,
                    padding=30
                )
            )
        for order in visible:
            orders_grid.controls.append(build_order_card(order))
        page.update()

    def on_tab_change(e):
        selected["tab"] = TABS[e.control.selected_index]
        render()

    # ===================== ACTIONS =====================

    def advance_order(order):
        staff.touch()
        db = SessionLocal()
        try:
            updated = advance(db, order, actor_role=staff.role, actor=staff.email, feed=feed)
            show_toast(page, f"Order #{updated.order_number} → {updated.status}")
        except TransitionConflictError:
            show_toast(page, "This order was already updated", "info")
            live.refresh()
        except OrderError as ex:
            show_toast(page, str(ex), "error")
        finally:
            db.close()

    def logout_user(e):
        page.go("/logout")

    # ===================== SUBSCRIBE =====================

    live = staff.register(LiveOrderList(
        feed, list_active, render,
        on_error=lambda ex: show_toast(page, "Failed to load orders", "error"),
        name="kitchen",
    ))

    def stat_card(title, status):
        return ft.Card(
            content=ft.Container(
                content=ft.Column([
                    ft.Text(title, size=12, color="grey700"),
                    count_texts[status],
                ], spacing=2),
                padding=12,
                bgcolor="white",
                border_radius=12,
                width=140
            )
        )

    # ===================== BUILD UI =====================

    page.clean()
    page.add(
        ft.Column([
            ft.Container(
                content=ft.Row([
                    ft.Row([
                        ft.Icon(ft.Icons.SOUP_KITCHEN, color="black"),
                        ft.Text("Kitchen Portal", size=20, weight="bold", color="black"),
                    ], spacing=8),
                    ft.IconButton(icon=ft.Icons.LOGOUT, icon_color="black", tooltip="Logout", on_click=logout_user)
                ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                padding=ft.padding.only(top=15, left=15, right=15, bottom=8),
                bgcolor="white"
            ),
            ft.Container(
                content=ft.Column([
                    ft.Row([
                        stat_card("Pending", PENDING),
                        stat_card("Cooking", COOKING),
                        stat_card("Ready", READY),
                    ], spacing=10, wrap=True),
                    ft.Tabs(
                        selected_index=0,
                        on_change=on_tab_change,
                        tabs=[ft.Tab(text=t.capitalize() if t != "all" else "All Orders") for t in TABS],
                        label_color="#E9190A",
                        unselected_label_color="black",
                        indicator_color="#E9190A"
                    ),
                    orders_grid
                ], expand=True, spacing=10),
                padding=10,
                expand=True,
                gradient=BRAND_GRADIENT
            )
        ], expand=True, spacing=0)
    )
    live.start()
