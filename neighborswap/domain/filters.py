"""Translation of optional search parameters into a listing filter."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import ValidationError

ALL_CATEGORIES = "All"

PriceInput = Union[str, int, float, None]


@dataclass(frozen=True, slots=True)
class ListingFilter:
    """
    Criteria for browsing active listings.

    Every key is optional; an unset key does not constrain the result.

    Attributes:
        category: Exact category match
        search: Case-insensitive substring of the name or the description
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound
        condition: Exact condition match
        owner_id: Restrict to listings owned by this user
    """

    category: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    condition: Optional[str] = None
    owner_id: Optional[int] = None

    @classmethod
    def from_params(
        cls,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: PriceInput = None,
        max_price: PriceInput = None,
        condition: Optional[str] = None,
    ) -> "ListingFilter":
        """
        Build a filter from raw query values.

        Empty strings count as absent and the "All" category is unfiltered.

        Raises:
            ValidationError: If a price bound is not a finite number
        """
        invalid: List[str] = []
        low = _parse_price(min_price, "minPrice", invalid)
        high = _parse_price(max_price, "maxPrice", invalid)
        if invalid:
            raise ValidationError("Price bounds must be numbers", fields=invalid)

        category = _clean(category)
        if category == ALL_CATEGORIES:
            category = None

        return cls(
            category=category,
            search=_clean(search),
            min_price=low,
            max_price=high,
            condition=_clean(condition),
        )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_price(value: PriceInput, field_name: str, invalid: List[str]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        invalid.append(field_name)
        return None
    if not math.isfinite(number):
        invalid.append(field_name)
        return None
    return number
