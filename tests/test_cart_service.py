from core.cart_service import add_to_cart, update_cart_quantity, remove_from_cart, clear_cart, get_cart_count


def test_add_same_item_bumps_quantity(menu):
    cart = []
    add_to_cart(cart, menu["Dosa"])
    add_to_cart(cart, menu["Dosa"], quantity=2)
    add_to_cart(cart, menu["Masala Chai"])

    assert len(cart) == 2
    assert cart[0] == {"menu_item_id": menu["Dosa"].id, "name": "Dosa", "price": 80.0, "quantity": 3}
    assert get_cart_count(cart) == 4


def test_update_to_zero_removes_line(menu):
    cart = []
    add_to_cart(cart, menu["Dosa"])

    assert update_cart_quantity(cart, menu["Dosa"].id, 5) is True
    assert cart[0]["quantity"] == 5
    assert update_cart_quantity(cart, menu["Dosa"].id, 0) is True
    assert cart == []


def test_update_unknown_item_returns_false(menu):
    cart = []
    assert update_cart_quantity(cart, 999, 1) is False
    assert remove_from_cart(cart, 999) is False


def test_clear_cart(menu):
    cart = []
    add_to_cart(cart, menu["Dosa"])
    clear_cart(cart)
    assert cart == []
    assert get_cart_count(cart) == 0
