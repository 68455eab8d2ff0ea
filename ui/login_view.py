import flet as ft

from core.db import SessionLocal
from core.auth_service import authenticate_user
from ui.admin_constants import ORANGE

ROLE_HOME = {
    "admin": "/admin",
    "cashier": "/cashier",
    "kitchen": "/kitchen",
}

def login_view(page: ft.Page, staff):
    page.title = "Staff Login - TablePay"

    email = ft.TextField(label="Email", width=300, autofocus=True, bgcolor="white")
    password = ft.TextField(label="Password", width=300, password=True, can_reveal_password=True, bgcolor="white")
    message = ft.Text("", color="red", size=12)

    def handle_login(e):
        db = SessionLocal()
        try:
            user, msg = authenticate_user(db, email.value, password.value)
        finally:
            db.close()

        if not user:
            message.value = msg
            page.update()
            return

        staff.start(user)
        page.go(ROLE_HOME.get(user.role, "/login"))

    password.on_submit = handle_login

    page.clean()
    page.add(
        ft.Container(
            content=ft.Column([
                ft.Icon(ft.Icons.RESTAURANT, size=60, color=ORANGE),
                ft.Text("TablePay", size=28, weight="bold", color="black"),
                ft.Text("Staff sign in", size=14, color="grey700"),
                ft.Container(height=10),
                email,
                password,
                message,
                ft.ElevatedButton(
                    "Login",
                    on_click=handle_login,
                    width=300,
                    height=45,
                    style=ft.ButtonStyle(bgcolor=ORANGE, color="white")
                ),
            ], horizontal_alignment=ft.CrossAxisAlignment.CENTER, spacing=10),
            alignment=ft.alignment.center,
            expand=True,
            padding=30
        )
    )
    page.update()
