import os
import threading
import time
from dotenv import load_dotenv
import flet as ft

# Load environment variables
load_dotenv()

# Import all models FIRST to ensure SQLAlchemy relationships are registered
from models.user import User  # noqa: F401
from models.menu_item import MenuItem  # noqa: F401
from models.order import Order, OrderItem  # noqa: F401
from models.audit_log import AuditLog  # noqa: F401

from core.db import Base, engine
from core.session_manager import StaffSession
from core.utils import show_toast

# Import views
from ui.login_view import login_view, ROLE_HOME
from ui.kitchen_view import kitchen_view
from ui.cashier_view import cashier_view
from ui.admin_view import admin_view

SESSION_CHECK_INTERVAL = int(os.getenv("SESSION_CHECK_INTERVAL", "10"))

# Which roles may open which dashboard
ROUTE_ROLES = {
    "/kitchen": ("kitchen", "admin"),
    "/cashier": ("cashier", "admin"),
    "/admin": ("admin",),
}

def main(page: ft.Page):
    page.title = "TablePay"
    page.padding = 0
    page.spacing = 0

    # One explicit session context per connected client
    staff = StaffSession()
    monitor_active = {"value": False}

    def force_logout(reason="You have been logged out."):
        staff.end()
        monitor_active["value"] = False
        page.go("/login")
        show_toast(page, reason, "info")

    def session_monitor():
        print("🚀 Session monitor started")
        while monitor_active["value"]:
            if staff.is_authenticated and not staff.is_active():
                print(f"❌ Session expired for {staff.email} - logging out")
                force_logout("Session expired. Please log in again.")
                break
            time.sleep(SESSION_CHECK_INTERVAL)
        print("🛑 Session monitor ended")

    def start_session_monitor():
        if monitor_active["value"]:
            return
        monitor_active["value"] = True
        threading.Thread(target=session_monitor, daemon=True).start()

    def route_change(e):
        # Tear down the previous dashboard's subscriptions before building the next
        staff.release()
        page.clean()

        if page.route == "/logout":
            force_logout()
            return

        if page.route in ("/", "/login"):
            if staff.is_authenticated:
                page.go(ROLE_HOME.get(staff.role, "/login"))
                return
            login_view(page, staff)
            return

        allowed = ROUTE_ROLES.get(page.route)
        if allowed is None:
            page.go("/login")
            return

        if not staff.is_active():
            show_toast(page, "Please log in to continue.", "info")
            page.go("/login")
            return

        if staff.role not in allowed:
            show_toast(page, "Access denied.", "error")
            page.go(ROLE_HOME.get(staff.role, "/login"))
            return

        staff.touch()
        start_session_monitor()

        if page.route == "/kitchen":
            kitchen_view(page, staff)
        elif page.route == "/cashier":
            cashier_view(page, staff)
        elif page.route == "/admin":
            admin_view(page, staff)

    def on_disconnect(e):
        # Browser tab closed: drop this client's subscriptions
        monitor_active["value"] = False
        staff.end()

    page.on_route_change = route_change
    page.on_disconnect = on_disconnect
    page.go("/login")

if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    # Every staff member opens the same server from their own browser
    ft.app(target=main, view=ft.AppView.WEB_BROWSER, port=int(os.getenv("PORT", "8550")))
