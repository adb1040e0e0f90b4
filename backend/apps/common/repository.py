from typing import Generic, Iterable, Optional, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    """Thin ORM gateway shared by the per-app repositories."""

    def __init__(self, model: Type[T]):
        self.model = model

    def queryset(self):
        return self.model.objects.all()

    def get(self, **filters) -> Optional[T]:
        return self.queryset().filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self.queryset().filter(**filters)

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def update(self, obj: T, **data) -> T:
        for field, value in data.items():
            setattr(obj, field, value)
        obj.save()
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()
