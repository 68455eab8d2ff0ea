# core/cart_service.py
# The cashier cart lives in memory until the order is placed.
# Each line: {"menu_item_id", "name", "price", "quantity"}

def add_to_cart(cart: list, menu_item, quantity: int = 1):
    """Add a menu item to the cart or bump its quantity if already there"""
    for line in cart:
        if line["menu_item_id"] == menu_item.id:
            line["quantity"] += quantity
            return line

    line = {
        "menu_item_id": menu_item.id,
        "name": menu_item.name,
        "price": menu_item.price,
        "quantity": quantity,
    }
    cart.append(line)
    return line

def update_cart_quantity(cart: list, menu_item_id: int, quantity: int):
    """Set a line's quantity; zero or less removes the line"""
    for line in cart:
        if line["menu_item_id"] == menu_item_id:
            if quantity <= 0:
                cart.remove(line)
            else:
                line["quantity"] = quantity
            return True
    return False

def remove_from_cart(cart: list, menu_item_id: int):
    """Remove a line from the cart"""
    return update_cart_quantity(cart, menu_item_id, 0)

def clear_cart(cart: list):
    cart.clear()

def get_cart_count(cart: list):
    """Get total number of items in cart"""
    return sum(line["quantity"] for line in cart)
