"""
Admin Panel - Main Orchestrator
Imports and coordinates all admin tabs
"""
import flet as ft
from core.change_feed import change_feed
from core.utils import show_toast
from ui.admin_constants import BRAND_GRADIENT
from ui.analytics_view import build_sales_tab
from ui.cashier_view import build_billing_tab, start_ready_notifier
from ui.order_history_view import build_order_history_tab
from ui.ready_to_serve import build_ready_panel

def admin_view(page: ft.Page, staff, feed=change_feed):
    """
    Main admin panel view - orchestrates all tabs
    """
    page.title = "Admin Panel - TablePay"

    # Check if user is admin
    if staff.role != "admin":
        show_toast(page, "Access denied. Admins only.", "error")
        page.go("/login")
        return

    start_ready_notifier(page, staff, feed)

    # ===================== BUILD TABS =====================
    
    tabs = ft.Tabs(
        selected_index=0,
        animation_duration=300,
        tabs=[
            build_billing_tab(page, staff, feed),
            ft.Tab(text="Ready to Serve", icon=ft.Icons.ROOM_SERVICE, content=build_ready_panel(page, staff, feed)),
            build_order_history_tab(page, staff, feed),
            build_sales_tab(page, staff),
        ],
        expand=True,
        label_color="#E9190A",  # Active tab text & icon color (red)
        unselected_label_color="black",
        indicator_color="#E9190A",
        indicator_border_radius=0,
        divider_color="grey300"
    )

    # ===================== HEADER & LOGOUT =====================

    def open_kitchen(e):
        page.go("/kitchen")

    def logout_user(e):
        page.go("/logout")

    # ===================== BUILD UI =====================
    
    page.clean()
    page.add(
        ft.Column([
            ft.Container(
                content=ft.Column([
                    ft.Container(
                        content=ft.Row([
                            ft.Text("Admin Panel", size=20, weight="bold", color="black"),
                            ft.Row([
                                ft.IconButton(
                                    icon=ft.Icons.SOUP_KITCHEN,
                                    icon_color="black",
                                    tooltip="Kitchen",
                                    on_click=open_kitchen
                                ),
                                ft.IconButton(
                                    icon=ft.Icons.LOGOUT,
                                    icon_color="black",
                                    tooltip="Logout",
                                    on_click=logout_user
                                )
                            ], spacing=5)
                        ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                        padding=ft.padding.only(top=15, left=15, right=15, bottom=8)
                    ),
                    ft.Divider(height=1, color="grey300", thickness=1)
                ], spacing=0),
                bgcolor="white",
                padding=0
            ),
            ft.Container(
                content=tabs,
                expand=True,
                gradient=BRAND_GRADIENT
            )
        ], expand=True, spacing=0)
    )
    page.update()
