import requests

from apps.cart_sync.api_client import ApiClient, ApiError


def cart_payload(*lines, total=None):
    """Cart response body; ``lines`` are ``(line_item_id, product_id, quantity)``."""
    items = [
        {
            "id": line_id,
            "productId": product_id,
            "quantity": quantity,
            "product": {
                "id": product_id,
                "title": f"Product {product_id}",
                "price": "19.90",
                "discount": 0,
                "thumbnail": f"https://img.example/{product_id}.png",
                "colors": ["black"],
                "sizes": ["M"],
                "gallery": [{"thumbnail": f"https://img.example/{product_id}-1.png"}],
            },
        }
        for line_id, product_id, quantity in lines
    ]
    body = {"cartItems": items}
    if total is not None:
        body["totalQuantity"] = total
    return body


class FakeApiClient(ApiClient):
    """Scripted transport: answers come from ``routes`` keyed by ``(method, path)``."""

    def __init__(self):
        super().__init__("http://testserver")
        self.routes = {}
        self.calls = []

    def respond(self, method, path, body=None, status=200):
        self.routes[(method, path)] = (status, body)

    def fail(self, method, path, exc):
        self.routes[(method, path)] = exc

    def request(self, method, path, payload=None):
        self.calls.append((method, path, payload))
        route = self.routes.get((method, path))
        if route is None:
            raise ApiError(404, {"error": {"code": "NOT_FOUND"}})
        if isinstance(route, requests.RequestException):
            raise route
        status, body = route
        if status >= 400:
            raise ApiError(status, body)
        return body

    def calls_to(self, method):
        return [call for call in self.calls if call[0] == method]


class ManualClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
