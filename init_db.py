from core.db import Base, engine, SessionLocal
from models.user import User  # noqa: F401
from models.menu_item import MenuItem
from models.order import Order, OrderItem  # noqa: F401
from models.audit_log import AuditLog  # noqa: F401
from core.user_service import create_default_staff

SAMPLE_MENU = [
    ("Paneer Tikka", "Starters", 220.0, "Char-grilled cottage cheese."),
    ("Veg Spring Rolls", "Starters", 150.0, "Crispy rolls with sweet chilli dip."),
    ("Butter Chicken", "Main Course", 320.0, "Creamy tomato gravy."),
    ("Dal Makhani", "Main Course", 240.0, "Slow-cooked black lentils."),
    ("Masala Dosa", "Main Course", 80.0, "Rice crepe with potato filling."),
    ("Veg Biryani", "Main Course", 260.0, "Fragrant basmati rice."),
    ("Butter Naan", "Main Course", 50.0, "Tandoor bread."),
    ("Gulab Jamun", "Desserts", 90.0, "Two pieces, warm."),
    ("Masala Chai", "Beverages", 40.0, "Spiced milk tea."),
    ("Sweet Lassi", "Beverages", 90.0, "Chilled yoghurt drink."),
]

def seed_menu_items(db):
    existing = db.query(MenuItem).first()
    if not existing:
        db.add_all([
            MenuItem(name=name, category=category, price=price, description=description, available=True)
            for name, category, price, description in SAMPLE_MENU
        ])
        db.commit()
        print("Sample menu items seeded.")
    else:
        print("Menu items already seeded.")

def init_db(drop=False):
    if drop:
        print("Rebuilding database (drop/create)...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("All tables created:")
    for table in Base.metadata.sorted_tables:
        print(f"   - {table.name}")

    db = SessionLocal()
    try:
        create_default_staff(db)
        seed_menu_items(db)
    finally:
        db.close()
    print("\nDatabase initialization complete!")

if __name__ == "__main__":
    import sys
    init_db(drop="--drop" in sys.argv)
