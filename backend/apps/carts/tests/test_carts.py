from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.carts.models import Cart, CartItem
from apps.catalog.models import Category, Product, ProductImage
from apps.users.models import User


class TestCartFlow(APITestCase):
    password = 'CartPass123'

    def setUp(self):
        self.cart_url = reverse('cart')
        category = Category.objects.create(name='jackets')
        self.jacket = Product.objects.create(
            id=42,
            title='Rain Jacket',
            price='80.00',
            discount=10,
            thumbnail='https://img.example/jacket.png',
            colors=['black', 'navy'],
            sizes=['M', 'L'],
            category=category,
        )
        ProductImage.objects.create(product=self.jacket, thumbnail='https://img.example/jacket-1.png', position=1)
        self.scarf = Product.objects.create(id=7, title='Scarf', price='15.00', category=category)
        self.user = User.objects.create_user(
            email='shopper@example.com', username='shopper', password=self.password
        )
        self._login(self.client, 'shopper@example.com')

    def _login(self, client, email):
        response = client.post(
            reverse('auth-login'), {'email': email, 'password': self.password}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return response

    def _item_url(self, line_item_id):
        return reverse('cart-item', kwargs={'line_item_id': line_item_id})

    def _add(self, product_id, quantity):
        return self.client.post(self.cart_url, {'productId': product_id, 'quantity': quantity}, format='json')

    def test_first_read_creates_empty_cart(self):
        response = self.client.get(self.cart_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'cartItems': [], 'totalQuantity': 0})
        self.assertTrue(Cart.objects.filter(user=self.user).exists())

    def test_add_then_read_returns_product_snapshot(self):
        response = self._add(42, 2)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'message': 'Item added to cart'})

        cart = self.client.get(self.cart_url).data
        self.assertEqual(cart['totalQuantity'], 2)
        self.assertEqual(len(cart['cartItems']), 1)
        line = cart['cartItems'][0]
        self.assertEqual(line['productId'], 42)
        self.assertEqual(line['quantity'], 2)
        self.assertEqual(line['product']['title'], 'Rain Jacket')
        self.assertEqual(line['product']['discount'], 10)
        self.assertEqual(line['product']['sizes'], ['M', 'L'])
        self.assertEqual(line['product']['gallery'][0]['thumbnail'], 'https://img.example/jacket-1.png')

    def test_adding_same_product_merges_quantities(self):
        self._add(42, 2)
        self._add(42, 3)
        cart = self.client.get(self.cart_url).data
        self.assertEqual(len(cart['cartItems']), 1)
        self.assertEqual(cart['cartItems'][0]['quantity'], 5)
        self.assertEqual(CartItem.objects.count(), 1)

    def test_add_defaults_quantity_to_one(self):
        response = self.client.post(self.cart_url, {'productId': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(self.cart_url).data['totalQuantity'], 1)

    def test_add_unknown_product_is_404(self):
        response = self._add(999, 1)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['code'], 'NOT_FOUND')
        self.assertFalse(CartItem.objects.exists())

    def test_add_rejects_non_positive_quantity(self):
        response = self._add(42, 0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_quantity_and_remove(self):
        self._add(42, 2)
        self._add(7, 1)
        items = self.client.get(self.cart_url).data['cartItems']
        jacket_line, scarf_line = items[0]['id'], items[1]['id']

        rejected = self.client.patch(self._item_url(jacket_line), {'quantity': 0}, format='json')
        self.assertEqual(rejected.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(CartItem.objects.get(id=jacket_line).quantity, 2)

        updated = self.client.patch(self._item_url(jacket_line), {'quantity': 4}, format='json')
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        self.assertEqual(updated.data['cartItem']['quantity'], 4)
        self.assertEqual(self.client.get(self.cart_url).data['totalQuantity'], 5)

        removed = self.client.delete(self._item_url(scarf_line))
        self.assertEqual(removed.status_code, status.HTTP_200_OK)
        self.assertEqual(removed.data, {'message': 'Item removed from cart'})
        cart = self.client.get(self.cart_url).data
        self.assertEqual(cart['totalQuantity'], 4)
        self.assertEqual([line['productId'] for line in cart['cartItems']], [42])

    def test_put_updates_quantity(self):
        self._add(42, 1)
        line_id = CartItem.objects.get().id
        response = self.client.put(self._item_url(line_id), {'quantity': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CartItem.objects.get(id=line_id).quantity, 3)

    def test_get_single_line_item(self):
        self._add(7, 2)
        line_id = CartItem.objects.get().id
        response = self.client.get(self._item_url(line_id))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['cartItem']['productId'], 7)

    def test_other_users_line_item_is_forbidden(self):
        self._add(42, 1)
        line_id = CartItem.objects.get().id

        User.objects.create_user(email='other@example.com', username='other', password=self.password)
        other = APIClient()
        self._login(other, 'other@example.com')

        patch_response = other.patch(self._item_url(line_id), {'quantity': 9}, format='json')
        self.assertEqual(patch_response.status_code, status.HTTP_403_FORBIDDEN)
        delete_response = other.delete(self._item_url(line_id))
        self.assertEqual(delete_response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(CartItem.objects.get(id=line_id).quantity, 1)

    def test_missing_line_item_is_404(self):
        response = self.client.delete(self._item_url(12345))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error']['details'], {'lineItemId': 12345})

    def test_malformed_line_item_id_is_400(self):
        response = self.client.patch(self._item_url('abc'), {'quantity': 2}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['details'], {'lineItemId': 'abc'})

    def test_unsupported_method_is_405(self):
        response = self.client.put(self.cart_url, {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertIn('GET', response['Allow'])
        self.assertIn('POST', response['Allow'])

    def test_anonymous_requests_are_401(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get(self.cart_url).status_code, status.HTTP_401_UNAUTHORIZED)
        response = anonymous.post(self.cart_url, {'productId': 42, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error']['code'], 'UNAUTHORIZED')

    def test_staff_cannot_own_a_cart(self):
        User.objects.create_user(
            email='admin@example.com', username='admin', password=self.password, is_staff=True
        )
        staff = APIClient()
        self._login(staff, 'admin@example.com')
        self.assertEqual(staff.get(self.cart_url).status_code, status.HTTP_403_FORBIDDEN)
        response = staff.post(self.cart_url, {'productId': 42, 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Cart.objects.filter(user__email='admin@example.com').exists())
