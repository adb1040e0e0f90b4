from django.core.management.base import BaseCommand
from django.core.management.color import no_style
from django.db import connection, transaction

from apps.carts.models import Cart, CartItem
from apps.catalog.models import Category, Product, ProductImage, Review
from apps.catalog.repositories import ProductRepository
from apps.users.models import User

CATEGORIES = ["outerwear", "tops", "footwear", "accessories"]

# (id, title, price, discount, category, colors, sizes, description)
PRODUCTS = [
    (1, "Rain Shell Jacket", "120.00", 15, "outerwear", ["black", "olive"], ["S", "M", "L", "XL"],
     "Seam-sealed shell with a packable hood and two zip pockets."),
    (2, "Quilted Vest", "75.00", 0, "outerwear", ["navy"], ["M", "L"],
     "Light insulation for cold mornings, folds into its own pocket."),
    (3, "Merino Crew Tee", "45.00", 10, "tops", ["grey", "white", "black"], ["S", "M", "L"],
     "Fine merino knit that stays fresh over several days of wear."),
    (4, "Flannel Overshirt", "59.90", 0, "tops", ["red", "green"], ["M", "L", "XL"],
     "Brushed cotton flannel with chest pockets and a relaxed fit."),
    (5, "Trail Runner", "139.00", 20, "footwear", ["blue", "black"], ["40", "41", "42", "43", "44"],
     "Grippy outsole and a rock plate for mixed terrain."),
    (6, "Canvas Sneaker", "65.00", 0, "footwear", ["white"], ["38", "39", "40", "41", "42"],
     "Vulcanised sole and organic cotton upper."),
    (7, "Wool Beanie", "24.00", 0, "accessories", ["charcoal", "mustard"], [],
     "Rib knit beanie in a soft wool blend."),
    (8, "Leather Belt", "49.00", 5, "accessories", ["brown", "black"], ["85", "90", "95", "100"],
     "Full grain leather with a solid brass buckle."),
]

GALLERY_SIZE = 3

USERS = [
    {"email": "jane@example.com", "username": "jane", "first_name": "Jane", "last_name": "Doe",
     "password": "Shopper123", "is_staff": False},
    {"email": "sam@example.com", "username": "sam", "first_name": "Sam", "last_name": "Lee",
     "password": "Shopper123", "is_staff": False},
    {"email": "admin@example.com", "username": "admin", "first_name": "Store", "last_name": "Admin",
     "password": "AdminPass123", "is_staff": True},
]

# (product id, reviewer email, rating, comment)
REVIEWS = [
    (1, "jane@example.com", 5, "Kept me dry through a full day of rain."),
    (1, "sam@example.com", 4, "Great shell, sleeves run a little long."),
    (3, "jane@example.com", 4, "Soft and does not itch."),
    (5, "sam@example.com", 5, "Best trail shoe I have owned."),
]


def _image_url(product_id: int, index: int) -> str:
    return f"https://images.storefront.example/products/{product_id}/{index}.jpg"


class Command(BaseCommand):
    help = "Seed the storefront with a demo catalog, customers, a staff account and reviews."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing data before seeding"
        )

    def _reset_sequences(self, models):
        # Rows were inserted with explicit ids.
        sql_list = connection.ops.sequence_reset_sql(no_style(), models)
        if not sql_list:
            return
        with connection.cursor() as cursor:
            for sql in sql_list:
                cursor.execute(sql)

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            CartItem.objects.all().delete()
            Cart.objects.all().delete()
            Review.objects.all().delete()
            ProductImage.objects.all().delete()
            Product.objects.all().delete()
            Category.objects.all().delete()
            User.objects.filter(email__in=[u["email"] for u in USERS]).delete()

        self.stdout.write("Seeding categories...")
        categories = {name: Category.objects.get_or_create(name=name)[0] for name in CATEGORIES}

        self.stdout.write("Seeding products...")
        for pid, title, price, discount, category, colors, sizes, description in PRODUCTS:
            product, _ = Product.objects.update_or_create(
                id=pid,
                defaults={
                    "title": title,
                    "price": price,
                    "discount": discount,
                    "description": description,
                    "thumbnail": _image_url(pid, 0),
                    "colors": colors,
                    "sizes": sizes,
                    "category": categories[category],
                },
            )
            for index in range(1, GALLERY_SIZE + 1):
                ProductImage.objects.get_or_create(
                    product=product, position=index, defaults={"thumbnail": _image_url(pid, index)}
                )

        self.stdout.write("Seeding users...")
        users = {}
        for payload in USERS:
            attrs = dict(payload)
            password = attrs.pop("password")
            user = User.objects.filter(email__iexact=attrs["email"]).first()
            if user is None:
                user = User.objects.create_user(password=password, **attrs)
            else:
                for field, value in attrs.items():
                    setattr(user, field, value)
                user.set_password(password)
                user.save()
            users[user.email] = user

        self.stdout.write("Seeding reviews...")
        products = ProductRepository()
        for product_id, email, rating, comment in REVIEWS:
            Review.objects.get_or_create(
                product_id=product_id,
                user=users[email],
                defaults={"rating": rating, "comment": comment},
            )
        for product in Product.objects.all():
            products.recalculate_rating(product)

        self._reset_sequences([Product])
        self.stdout.write(self.style.SUCCESS("Storefront seed completed."))
