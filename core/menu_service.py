from sqlalchemy.orm import Session
from models.menu_item import MenuItem

def get_available_menu(db: Session):
    """Menu items on sale, grouped by category then name"""
    return (
        db.query(MenuItem)
        .filter(MenuItem.available == True)  # noqa: E712
        .order_by(MenuItem.category.asc(), MenuItem.name.asc())
        .all()
    )
