from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.carts.models import Cart
from apps.catalog.models import Product, ProductImage, Review
from apps.users.models import User


class SeedStorefrontCommandTests(TestCase):
    def _seed(self, *args):
        out = StringIO()
        call_command("seed_storefront", *args, stdout=out)
        return out.getvalue()

    def test_seed_populates_catalog_users_and_reviews(self):
        output = self._seed()
        self.assertIn("Storefront seed completed.", output)
        self.assertEqual(Product.objects.count(), 8)
        self.assertEqual(ProductImage.objects.filter(product_id=1).count(), 3)
        self.assertTrue(User.objects.get(email="admin@example.com").is_staff)
        self.assertEqual(Review.objects.count(), 4)
        jacket = Product.objects.get(id=1)
        self.assertEqual(jacket.review_count, 2)
        self.assertEqual(float(jacket.rating), 4.5)
        self.assertFalse(Cart.objects.exists())

    def test_seed_is_idempotent(self):
        self._seed()
        self._seed()
        self.assertEqual(Product.objects.count(), 8)
        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Review.objects.count(), 4)

    def test_flush_recreates_data(self):
        self._seed()
        self._seed("--flush")
        self.assertEqual(Product.objects.count(), 8)
        self.assertTrue(User.objects.get(email="jane@example.com").check_password("Shopper123"))
