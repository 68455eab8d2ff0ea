"""
Sales report tab: today's totals and payment-mode split
"""
import flet as ft
from flet.plotly_chart import PlotlyChart
import plotly.graph_objects as go
from sqlalchemy.exc import SQLAlchemyError

from core.analytics_service import get_daily_sales_summary, get_hourly_sales_pattern
from core.db import SessionLocal
from core.utils import show_toast
from ui.admin_constants import PAYMENT_LABELS, ORANGE


def _stat_card(title, value, icon):
    return ft.Card(
        content=ft.Container(
            content=ft.Column([
                ft.Row([ft.Icon(icon, size=18, color=ORANGE), ft.Text(title, size=12, color="grey700")], spacing=6),
                ft.Text(value, size=20, weight="bold", color="black"),
            ], spacing=4),
            padding=12,
            bgcolor="white",
            border_radius=12,
            width=180
        )
    )


def build_sales_tab(page: ft.Page, staff):
    content = ft.Column(spacing=12, scroll=ft.ScrollMode.AUTO, expand=True)

    def load_report(e=None):
        staff.touch()
        db = SessionLocal()
        try:
            summary = get_daily_sales_summary(db)
            hourly = get_hourly_sales_pattern(db)
        except SQLAlchemyError as ex:
            print(f"❌ Error fetching sales data: {ex}")
            show_toast(page, "Failed to load sales report", "error")
            return
        finally:
            db.close()

        payments = summary["payments"]
        pie = go.Figure(go.Pie(
            labels=[PAYMENT_LABELS[m] for m in payments],
            values=list(payments.values()),
            hole=0.4
        ))
        pie.update_layout(title="Sales by payment mode", height=300, margin=dict(l=10, r=10, t=40, b=10))

        bars = go.Figure(go.Bar(x=hourly["hours"], y=hourly["orders"], marker_color=ORANGE))
        bars.update_layout(title="Orders per hour", height=300, margin=dict(l=10, r=10, t=40, b=10))

        content.controls = [
            ft.Row([
                ft.Text("Today's Sales", size=20, weight="bold", color="black"),
                ft.IconButton(icon=ft.Icons.REFRESH, tooltip="Refresh", on_click=load_report),
            ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
            ft.Row([
                _stat_card("Total sales", f"₹{summary['total_sales']:.2f}", ft.Icons.PAYMENTS),
                _stat_card("Orders", str(summary["total_orders"]), ft.Icons.RECEIPT),
                _stat_card("Average order", f"₹{summary['average_order_value']:.2f}", ft.Icons.TRENDING_UP),
                _stat_card("Tax collected", f"₹{summary['total_tax']:.2f}", ft.Icons.ACCOUNT_BALANCE),
                _stat_card("Service charge", f"₹{summary['total_service_charge']:.2f}", ft.Icons.ROOM_SERVICE),
            ], wrap=True, spacing=10),
            ft.Row([
                ft.Text(f"{PAYMENT_LABELS[m]}: ₹{amount:.2f}", size=13, color="black")
                for m, amount in payments.items()
            ], spacing=20),
            ft.Container(content=PlotlyChart(pie, expand=True), bgcolor="white", border_radius=12, padding=8),
            ft.Container(content=PlotlyChart(bars, expand=True), bgcolor="white", border_radius=12, padding=8),
        ]
        page.update()

    load_report()

    return ft.Tab(
        text="Sales Report",
        icon=ft.Icons.ANALYTICS,
        content=ft.Container(content=content, expand=True, padding=10)
    )
