from django.urls import path, re_path

from .views import CartItemView, CartView

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    # Any segment matches so malformed ids get a 400 instead of a 404.
    re_path(r"^(?P<line_item_id>[^/]+)/$", CartItemView.as_view(), name="cart-item"),
]
