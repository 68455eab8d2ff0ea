# core/config.py
import os
from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///tablepay.db")

# Billing
TAX_RATE = float(os.getenv("TAX_RATE", "0.05"))
SERVICE_CHARGE_RATE = float(os.getenv("SERVICE_CHARGE_RATE", "0.05"))
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "TP")

# Ready orders waiting longer than this are flagged for priority serving
URGENT_AFTER_MINUTES = int(os.getenv("URGENT_AFTER_MINUTES", "5"))

SESSION_TIMEOUT = int(os.getenv("SESSION_TIMEOUT", "900"))

# Default staff accounts (one per role)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@tablepay.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
CASHIER_EMAIL = os.getenv("CASHIER_EMAIL", "cashier@tablepay.com")
CASHIER_PASSWORD = os.getenv("CASHIER_PASSWORD", "cashier123")
KITCHEN_EMAIL = os.getenv("KITCHEN_EMAIL", "kitchen@tablepay.com")
KITCHEN_PASSWORD = os.getenv("KITCHEN_PASSWORD", "kitchen123")
