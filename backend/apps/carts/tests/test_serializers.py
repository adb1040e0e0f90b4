import unittest

from apps.carts.commands import CartItemAddCommand, strict_positive_int
from apps.carts.serializers import CartItemAddSerializer, CartItemQuantitySerializer


class StrictQuantityTests(unittest.TestCase):
    def test_accepts_whole_numbers(self):
        self.assertEqual(strict_positive_int(3), 3)
        self.assertEqual(strict_positive_int(2.0), 2)

    def test_rejects_everything_else(self):
        for value in (0, -2, 1.5, "3", True, False, None, [1]):
            self.assertIsNone(strict_positive_int(value), value)

    def test_quantity_serializer_rejects_string_numbers(self):
        serializer = CartItemQuantitySerializer(data={"quantity": "2"})
        self.assertFalse(serializer.is_valid())
        self.assertIn("quantity", serializer.errors)

    def test_quantity_serializer_rejects_booleans(self):
        self.assertFalse(CartItemQuantitySerializer(data={"quantity": True}).is_valid())

    def test_quantity_serializer_accepts_integer(self):
        serializer = CartItemQuantitySerializer(data={"quantity": 4})
        self.assertTrue(serializer.is_valid())
        self.assertEqual(serializer.validated_data["quantity"], 4)


class AddPayloadTests(unittest.TestCase):
    def test_quantity_defaults_to_one(self):
        serializer = CartItemAddSerializer(data={"productId": 42})
        self.assertTrue(serializer.is_valid())
        self.assertEqual(serializer.validated_data["quantity"], 1)

    def test_add_requires_positive_quantity(self):
        self.assertFalse(CartItemAddSerializer(data={"productId": 42, "quantity": 0}).is_valid())

    def test_command_accepts_snake_case(self):
        cmd = CartItemAddCommand.from_raw({"product_id": "42", "quantity": "2"})
        self.assertEqual((cmd.product_id, cmd.quantity), (42, 2))

    def test_command_rejects_missing_product(self):
        with self.assertRaises(ValueError):
            CartItemAddCommand.from_raw({"quantity": 2})
