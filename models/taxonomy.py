"""Canonical tag values for clothing items.

Category, color and occasion are open-world: the app suggests a fixed list but
users may type their own value. Each tag is therefore either a member of the
matching enum or an :class:`Other` carrying the custom text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Type, TypeVar, Union


class Category(Enum):
    HEADWEAR = "Headwear"
    JACKET = "Jacket"
    SHIRT = "Shirt"
    T_SHIRT = "T-Shirt"
    SWEATER = "Sweater"
    DRESS = "Dress"
    SKIRT = "Skirt"
    PANTS = "Pants"
    SHORTS = "Shorts"
    JEANS = "Jeans"
    SHOES = "Shoes"
    ACCESSORIES = "Accessories"


class Color(Enum):
    BLACK = "Black"
    WHITE = "White"
    GRAY = "Gray"
    NAVY = "Navy"
    BLUE = "Blue"
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    PURPLE = "Purple"
    PINK = "Pink"
    BROWN = "Brown"
    BEIGE = "Beige"
    ORANGE = "Orange"


class Occasion(Enum):
    CASUAL = "Casual"
    BUSINESS_CASUAL = "Business Casual"
    FORMAL = "Formal"
    BUSINESS_FORMAL = "Business Formal"
    SPORTSWEAR = "Sportswear"
    BEACHWEAR = "Beachwear"
    PARTY = "Party"


@dataclass(frozen=True)
class Other:
    """A user-supplied tag outside the suggested list."""

    value: str

    def __str__(self) -> str:
        return self.value


CategoryTag = Union[Category, Other]
ColorTag = Union[Color, Other]
OccasionTag = Union[Occasion, Other]

E = TypeVar("E", bound=Enum)


def _parse_tag(raw: object, enum_type: Type[E], field_name: str) -> Union[E, Other]:
    if isinstance(raw, (enum_type, Other)):
        return raw
    text = str(raw or "").strip()
    if not text:
        raise ValueError(f"{field_name} is required")
    lowered = text.lower()
    for member in enum_type:
        if member.value.lower() == lowered:
            return member
    return Other(text)


def parse_category(raw: object) -> CategoryTag:
    return _parse_tag(raw, Category, "category")


def parse_color(raw: object) -> ColorTag:
    return _parse_tag(raw, Color, "color")


def parse_occasion(raw: object) -> OccasionTag:
    return _parse_tag(raw, Occasion, "occasion")


def tag_label(tag: Union[Enum, Other]) -> str:
    """Render a tag back to the string stored and displayed."""

    return tag.value


__all__ = [
    "Category",
    "Color",
    "Occasion",
    "Other",
    "CategoryTag",
    "ColorTag",
    "OccasionTag",
    "parse_category",
    "parse_color",
    "parse_occasion",
    "tag_label",
]
