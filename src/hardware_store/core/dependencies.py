from typing import TypeVar, Type, Dict, Any, Callable

from sqlalchemy.engine import Engine

from hardware_store.core.config import Config
from hardware_store.repositories import (
    CartRepository, CategoryRepository, OrderRepository, ProductRepository, ProfileRepository
)
from hardware_store.services import AccountService, CartService, CatalogService, OrderService

T = TypeVar('T')


class DependencyContainer:
    """
    Per-application registry of repositories and services

    Factories run on first lookup and their result is kept, so every request
    of one app shares the same instances.
    """

    def __init__(self):
        self._instances: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[[], Any]] = {}

    def register_singleton(self, service_class: Type[T], instance: T) -> None:
        self._instances[service_class] = instance

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        self._factories[service_class] = factory

    def get(self, service_class: Type[T]) -> T:
        if service_class not in self._instances:
            factory = self._factories.get(service_class)
            if factory is None:
                raise ValueError(f"{service_class.__name__} is not registered")
            self._instances[service_class] = factory()
        return self._instances[service_class]


def build_container(config: Config, engine: Engine) -> DependencyContainer:
    """Wire repositories and services for one application instance"""
    container = DependencyContainer()
    container.register_singleton(Config, config)
    container.register_singleton(Engine, engine)

    container.register_factory(ProductRepository, lambda: ProductRepository(engine))
    container.register_factory(CategoryRepository, lambda: CategoryRepository(engine))
    container.register_factory(CartRepository, lambda: CartRepository(engine))
    container.register_factory(OrderRepository, lambda: OrderRepository(engine))
    container.register_factory(ProfileRepository, lambda: ProfileRepository(engine))

    container.register_factory(CatalogService, lambda: CatalogService(
        container.get(ProductRepository), container.get(CategoryRepository), config.store
    ))
    container.register_factory(CartService, lambda: CartService(
        container.get(CartRepository), container.get(ProductRepository), config.store
    ))
    container.register_factory(OrderService, lambda: OrderService(
        container.get(OrderRepository), config.store
    ))
    container.register_factory(AccountService, lambda: AccountService(
        container.get(ProfileRepository)
    ))
    return container
