"""Faker provider producing commerce department names."""
from typing import List

from faker import Faker
from faker.providers import BaseProvider


class CommerceProvider(BaseProvider):
    """
    Adds `commerce_category()` and `commerce_categories(count)` to a Faker instance.

    Names are drawn with replacement from a fixed department list, so a batch
    may contain repeats.
    """

    departments = (
        "Books", "Movies", "Music", "Games", "Electronics", "Computers", "Home",
        "Garden", "Tools", "Grocery", "Health", "Beauty", "Toys", "Kids", "Baby",
        "Clothing", "Shoes", "Jewelery", "Sports", "Outdoors", "Automotive", "Industrial",
    )

    def commerce_category(self) -> str:
        return self.random_element(self.departments)

    def commerce_categories(self, count: int) -> List[str]:
        return [self.commerce_category() for _ in range(count)]


def with_commerce_provider(faker: Faker) -> Faker:
    """Register CommerceProvider on `faker` unless it already carries one."""
    if not any(isinstance(provider, CommerceProvider) for provider in faker.providers):
        faker.add_provider(CommerceProvider)
    return faker
