"""
Cashier dashboard: menu, cart, customer details, invoice and ready-to-serve
"""
import flet as ft
from sqlalchemy.exc import SQLAlchemyError

from core.billing import compute_bill
from core.cart_service import add_to_cart, update_cart_quantity, clear_cart, get_cart_count
from core.change_feed import change_feed
from core.db import SessionLocal
from core.errors import OrderError
from core.menu_service import get_available_menu
from core.notifier import ReadyNotifier
from core.order_service import create_order
from core.utils import show_toast, make_sound_player
from ui.admin_constants import BRAND_GRADIENT, CATEGORIES, PAYMENT_LABELS, ORANGE
from ui.ready_to_serve import build_ready_panel


def build_billing_tab(page: ft.Page, staff, feed=change_feed):
    """
    Build the billing tab (menu + cart + invoice)

    Returns:
        ft.Tab: billing tab
    """
    db = SessionLocal()
    try:
        menu_items = get_available_menu(db)
    except SQLAlchemyError as ex:
        print(f"❌ Error fetching menu items: {ex}")
        show_toast(page, "Failed to load menu items", "error")
        menu_items = []
    finally:
        db.close()

    cart = []
    customer_name = ft.TextField(label="Customer name", dense=True, bgcolor="white")
    table_number = ft.TextField(label="Table number", dense=True, bgcolor="white", width=140)
    contact = ft.TextField(label="Contact (optional)", dense=True, bgcolor="white")
    payment_mode = ft.RadioGroup(
        value="cash",
        content=ft.Row([ft.Radio(value=mode, label=label) for mode, label in PAYMENT_LABELS.items()])
    )
    cart_column = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)
    totals_column = ft.Column(spacing=2)
    cart_title = ft.Text("Cart (0)", size=16, weight="bold", color="black")
    place_button = ft.ElevatedButton(
        "Place Order",
        on_click=lambda e: place_order(),
        style=ft.ButtonStyle(bgcolor="#FEB23F", color="white"),
        height=45,
        expand=True
    )

    # ===================== MENU =====================

    def build_menu_tile(item):
        return ft.Container(
            content=ft.Row([
                ft.Column([
                    ft.Text(item.name, weight="bold", size=13, color="black"),
                    ft.Text(item.description or "", size=11, color="grey700", max_lines=1),
                ], spacing=0, expand=True),
                ft.Text(f"₹{item.price:.2f}", size=13, color="green", weight="bold"),
                ft.IconButton(
                    icon=ft.Icons.ADD_CIRCLE,
                    icon_color=ORANGE,
                    on_click=lambda e, i=item: on_add(i)
                )
            ]),
            bgcolor="white",
            border_radius=10,
            padding=ft.padding.symmetric(horizontal=10, vertical=4)
        )

    menu_column = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)
    ordered_categories = CATEGORIES + sorted({i.category for i in menu_items if i.category not in CATEGORIES})
    for category in ordered_categories:
        items = [i for i in menu_items if i.category == category]
        if not items:
            continue
        menu_column.controls.append(ft.Text(category, size=15, weight="bold", color="black"))
        menu_column.controls.extend(build_menu_tile(i) for i in items)
    if not menu_items:
        menu_column.controls.append(ft.Text("No menu items available", color="grey700"))

    # ===================== CART =====================

    def render_cart():
        cart_column.controls.clear()
        for line in cart:
            cart_column.controls.append(
                ft.Row([
                    ft.Text(f"{line['name']}", size=13, color="black", expand=True),
                    ft.IconButton(icon=ft.Icons.REMOVE, icon_size=16,
                                  on_click=lambda e, l=line: on_quantity(l, l["quantity"] - 1)),
                    ft.Text(str(line["quantity"]), size=13, color="black"),
                    ft.IconButton(icon=ft.Icons.ADD, icon_size=16,
                                  on_click=lambda e, l=line: on_quantity(l, l["quantity"] + 1)),
                    ft.Text(f"₹{line['price'] * line['quantity']:.2f}", size=13, weight="bold", color="black"),
                ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN)
            )
        if not cart:
            cart_column.controls.append(ft.Text("Cart is empty", size=12, color="grey700"))

        bill = compute_bill(cart)
        totals_column.controls = [
            _total_row("Subtotal", bill.subtotal),
            _total_row("Tax", bill.tax),
            _total_row("Service charge", bill.service_charge),
            _total_row("Total", bill.total, bold=True),
        ]
        cart_title.value = f"Cart ({get_cart_count(cart)})"
        page.update()

    def on_add(item):
        staff.touch()
        add_to_cart(cart, item)
        render_cart()

    def on_quantity(line, quantity):
        update_cart_quantity(cart, line["menu_item_id"], quantity)
        render_cart()

    def on_clear(e=None, silent=False):
        clear_cart(cart)
        customer_name.value = ""
        table_number.value = ""
        contact.value = ""
        payment_mode.value = "cash"
        render_cart()
        if not silent:
            show_toast(page, "Cart cleared", "info")

    # ===================== PLACE ORDER =====================

    def place_order():
        staff.touch()
        place_button.disabled = True
        page.update()
        db = SessionLocal()
        try:
            order = create_order(
                db,
                customer={"name": customer_name.value, "table_number": table_number.value, "contact": contact.value},
                lines=cart,
                payment_mode=payment_mode.value,
                created_by=staff.user_id,
                actor=staff.email,
                feed=feed,
            )
            show_invoice(order)
            on_clear(silent=True)
            show_toast(page, f"Order #{order.order_number} sent to kitchen!")
        except OrderError as ex:
            show_toast(page, str(ex), "error")
        finally:
            db.close()
            place_button.disabled = False
            page.update()

    def show_invoice(order):
        rows = [
            ft.Row([
                ft.Text(f"{item.quantity}x {item.item_name}", size=13, expand=True),
                ft.Text(f"₹{item.line_total:.2f}", size=13),
            ])
            for item in order.items
        ]
        dlg = ft.AlertDialog(
            title=ft.Text(f"Invoice #{order.order_number}", weight="bold"),
            content=ft.Column([
                ft.Text(f"{order.customer_name} • Table {order.table_number}", size=13, color="grey700"),
                ft.Text(order.created_at.strftime("%d %b %Y, %H:%M"), size=12, color="grey700"),
                ft.Divider(height=1),
                *rows,
                ft.Divider(height=1),
                _total_row("Subtotal", order.subtotal),
                _total_row("Tax", order.tax),
                _total_row("Discount", order.discount),
                _total_row("Service charge", order.service_charge),
                _total_row("Total", order.total, bold=True),
                ft.Text(f"Paid by {PAYMENT_LABELS.get(order.payment_mode, order.payment_mode)}", size=12, color="grey700"),
            ], tight=True, spacing=4, width=320),
            actions=[ft.TextButton("Close", on_click=lambda e: page.close(dlg))],
        )
        page.open(dlg)

    render_cart()

    return ft.Tab(
        text="Billing",
        icon=ft.Icons.POINT_OF_SALE,
        content=ft.Container(
            content=ft.ResponsiveRow([
                ft.Container(content=menu_column, col={"sm": 12, "md": 7}, padding=10, height=600),
                ft.Container(
                    content=ft.Column([
                        ft.Row([
                            cart_title,
                            ft.TextButton("Clear", on_click=on_clear),
                        ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                        cart_column,
                        ft.Divider(height=1),
                        customer_name,
                        ft.Row([table_number, contact], spacing=8),
                        payment_mode,
                        totals_column,
                        ft.Row([place_button]),
                    ], spacing=8),
                    col={"sm": 12, "md": 5},
                    bgcolor="white",
                    border_radius=12,
                    padding=12,
                    height=600
                ),
            ]),
            padding=10
        )
    )


def _total_row(label, amount, bold=False):
    return ft.Row([
        ft.Text(label, size=14 if bold else 13, weight="bold" if bold else None),
        ft.Text(f"₹{amount:.2f}", size=14 if bold else 13, weight="bold" if bold else None),
    ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN)


def start_ready_notifier(page: ft.Page, staff, feed=change_feed):
    """Toast + chime whenever an order becomes ready; released with the session."""
    notifier = ReadyNotifier(
        feed,
        staff.role,
        show_toast=lambda message: show_toast(page, message, "ready", duration=5000),
        play_sound=make_sound_player(page),
    )
    return staff.register(notifier.start())


def cashier_view(page: ft.Page, staff, feed=change_feed):
    page.title = "Cashier - TablePay"

    if staff.role not in ("cashier", "admin"):
        show_toast(page, "Access denied. Cashiers only.", "error")
        page.go("/login")
        return

    start_ready_notifier(page, staff, feed)

    tabs = ft.Tabs(
        selected_index=0,
        animation_duration=300,
        tabs=[
            build_billing_tab(page, staff, feed),
            ft.Tab(text="Ready to Serve", icon=ft.Icons.ROOM_SERVICE, content=build_ready_panel(page, staff, feed)),
        ],
        expand=True,
        label_color="#E9190A",
        unselected_label_color="black",
        indicator_color="#E9190A",
        divider_color="grey300"
    )

    page.clean()
    page.add(
        ft.Column([
            ft.Container(
                content=ft.Row([
                    ft.Text(f"Cashier • {staff.full_name}", size=20, weight="bold", color="black"),
                    ft.IconButton(icon=ft.Icons.LOGOUT, icon_color="black", tooltip="Logout",
                                  on_click=lambda e: page.go("/logout"))
                ], alignment=ft.MainAxisAlignment.SPACE_BETWEEN),
                padding=ft.padding.only(top=15, left=15, right=15, bottom=8),
                bgcolor="white"
            ),
            ft.Container(content=tabs, expand=True, gradient=BRAND_GRADIENT)
        ], expand=True, spacing=0)
    )
    page.update()
