"""
Shared layout constants for the staff dashboards
"""
import flet as ft

# ===== RESPONSIVE LAYOUT CONSTANTS =====
BREAKPOINT = 800  # Mobile vs Desktop threshold (px)

# Grid spacing
GRID_SPACING = 10
GRID_RUN_SPACING = 10

# ===== BRAND =====
ORANGE = "#FF6B35"
RED = "#E9190A"
BRAND_GRADIENT = ft.LinearGradient(
    begin=ft.alignment.top_center,
    end=ft.alignment.bottom_center,
    colors=["#FFF6F6", "#F7C171", "#D49535"]
)

# Menu categories, in display order
CATEGORIES = ["Starters", "Main Course", "Desserts", "Beverages"]

PAYMENT_LABELS = {"cash": "Cash", "card": "Card", "upi": "UPI"}
