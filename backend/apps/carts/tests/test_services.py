import types
import unittest
from unittest.mock import patch

from apps.carts.mappers import CartItemMapper, CartMapper
from apps.carts.services import CartService, STAFF_CART_MESSAGE


class DummyAtomic:
    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class StubRelated:
    def __init__(self, items=()):
        self._items = list(items)

    def all(self):
        return list(self._items)


def make_product(product_id, price="12.50"):
    return types.SimpleNamespace(
        id=product_id,
        title=f"Product {product_id}",
        price=price,
        discount=0,
        thumbnail=f"https://img.example/{product_id}.png",
        colors=["black"],
        sizes=["L"],
        gallery=StubRelated([types.SimpleNamespace(thumbnail=f"g{product_id}.png")]),
    )


class FakeProductRepository:
    def __init__(self, products):
        self._products = {p.id: p for p in products}

    def get(self, **filters):
        return self._products.get(filters.get("id"))


class FakeCartStore:
    """In-memory carts and line items sharing one id space per table."""

    def __init__(self, products):
        self.products = products
        self.carts = {}
        self.items = {}
        self._cart_pk = 1
        self._item_pk = 1

    def items_for(self, cart_id):
        return [i for i in sorted(self.items.values(), key=lambda i: i.id) if i.cart_id == cart_id]


class FakeCartRepository:
    def __init__(self, store: FakeCartStore):
        self.store = store

    def get_or_create_for_user(self, user_id):
        for cart in self.store.carts.values():
            if cart.user_id == user_id:
                return cart, False
        cart = types.SimpleNamespace(id=self.store._cart_pk, user_id=user_id)
        store = self.store
        cart.items = types.SimpleNamespace(all=lambda cid=cart.id: store.items_for(cid))
        self.store.carts[cart.id] = cart
        self.store._cart_pk += 1
        return cart, True

    def get_with_items(self, cart_id):
        return self.store.carts.get(cart_id)


class FakeCartItemRepository:
    def __init__(self, store: FakeCartStore):
        self.store = store
        self.deleted = []

    def get_with_product(self, item_id):
        return self.store.items.get(item_id)

    def get_for_cart_product(self, cart_id, product_id):
        for item in self.store.items.values():
            if item.cart_id == cart_id and item.product_id == product_id:
                return item
        return None

    def create(self, **data):
        item = types.SimpleNamespace(
            id=self.store._item_pk,
            cart=self.store.carts[data["cart_id"]],
            product=self.store.products.get(id=data["product_id"]),
            **data,
        )
        self.store.items[item.id] = item
        self.store._item_pk += 1
        return item

    def increment_quantity(self, item, by):
        item.quantity += by
        return item

    def set_quantity(self, item, quantity):
        item.quantity = quantity
        return item

    def delete(self, item):
        self.deleted.append(item.id)
        self.store.items.pop(item.id, None)


class CartServiceTests(unittest.TestCase):
    def setUp(self):
        self.products = FakeProductRepository([make_product(42), make_product(43)])
        self.store = FakeCartStore(self.products)
        self.items = FakeCartItemRepository(self.store)
        item_mapper = CartItemMapper()
        self.service = CartService(
            carts=FakeCartRepository(self.store),
            items=self.items,
            products=self.products,
            cart_mapper=CartMapper(item_mapper),
            item_mapper=item_mapper,
        )
        self.atomic_patcher = patch(
            "apps.carts.services.transaction.atomic", DummyAtomic()
        )
        self.atomic_patcher.start()

    def tearDown(self):
        self.atomic_patcher.stop()

    def test_snapshot_creates_empty_cart_lazily(self):
        dto, error = self.service.get_cart_snapshot(7)
        self.assertIsNone(error)
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total_quantity, 0)
        self.assertEqual(len(self.store.carts), 1)
        again, _ = self.service.get_cart_snapshot(7)
        self.assertEqual(again.id, dto.id)
        self.assertEqual(len(self.store.carts), 1)

    def test_add_to_empty_cart(self):
        message, error = self.service.add_item(7, {"productId": 42, "quantity": 2})
        self.assertIsNone(error)
        self.assertEqual(message, "Item added to cart")
        dto, _ = self.service.get_cart_snapshot(7)
        self.assertEqual(dto.total_quantity, 2)
        self.assertEqual(dto.items[0].product.title, "Product 42")
        self.assertEqual(dto.items[0].product.gallery[0].thumbnail, "g42.png")

    def test_add_same_product_merges_quantity(self):
        self.service.add_item(7, {"productId": 42, "quantity": 2})
        self.service.add_item(7, {"productId": 42, "quantity": 3})
        dto, _ = self.service.get_cart_snapshot(7)
        self.assertEqual(len(dto.items), 1)
        self.assertEqual(dto.items[0].quantity, 5)

    def test_total_quantity_sums_line_items(self):
        self.service.add_item(7, {"productId": 42, "quantity": 2})
        self.service.add_item(7, {"productId": 43, "quantity": 3})
        dto, _ = self.service.get_cart_snapshot(7)
        self.assertEqual(dto.total_quantity, 5)

    def test_add_unknown_product(self):
        _, error = self.service.add_item(7, {"productId": 999, "quantity": 1})
        self.assertEqual(error[0], "NOT_FOUND")
        self.assertEqual(self.store.items, {})

    def test_add_invalid_payload(self):
        _, error = self.service.add_item(7, {"productId": "abc", "quantity": 1})
        self.assertEqual(error[0], "VALIDATION_ERROR")

    def test_staff_cannot_own_cart(self):
        _, error = self.service.add_item(1, {"productId": 42, "quantity": 1}, is_privileged=True)
        self.assertEqual(error, ("FORBIDDEN", STAFF_CART_MESSAGE, {"userId": 1}))
        _, error = self.service.get_cart_snapshot(1, is_privileged=True)
        self.assertEqual(error[0], "FORBIDDEN")
        self.assertEqual(self.store.carts, {})

    def test_update_quantity_sets_value(self):
        self.service.add_item(7, {"productId": 42, "quantity": 1})
        dto, error = self.service.update_item_quantity(7, 1, {"quantity": 4})
        self.assertIsNone(error)
        self.assertEqual(dto.quantity, 4)

    def test_update_rejects_non_integer_quantities(self):
        self.service.add_item(7, {"productId": 42, "quantity": 1})
        for bad in (0, -1, 1.5, "2", True, None):
            _, error = self.service.update_item_quantity(7, 1, {"quantity": bad})
            self.assertEqual(error[0], "VALIDATION_ERROR", bad)
        self.assertEqual(self.store.items[1].quantity, 1)

    def test_item_of_another_user_is_forbidden(self):
        self.service.add_item(7, {"productId": 42, "quantity": 1})
        _, error = self.service.update_item_quantity(8, 1, {"quantity": 3})
        self.assertEqual(error[0], "FORBIDDEN")
        removed, error = self.service.remove_item(8, 1)
        self.assertFalse(removed)
        self.assertEqual(error[0], "FORBIDDEN")
        self.assertEqual(self.items.deleted, [])

    def test_missing_item_is_not_found(self):
        _, error = self.service.get_item(7, 55)
        self.assertEqual(error, ("NOT_FOUND", "Cart item not found", {"lineItemId": 55}))

    def test_remove_item(self):
        self.service.add_item(7, {"productId": 42, "quantity": 2})
        self.service.add_item(7, {"productId": 43, "quantity": 3})
        removed, error = self.service.remove_item(7, 2)
        self.assertTrue(removed)
        self.assertIsNone(error)
        dto, _ = self.service.get_cart_snapshot(7)
        self.assertEqual([i.product_id for i in dto.items], [42])
        self.assertEqual(dto.total_quantity, 2)
