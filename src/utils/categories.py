"""
Category helpers.

Splits the comma-delimited business category string into clean tokens
and derives the (business_id, category) membership relation.
"""

from typing import List, Optional

import pandas as pd

MEMBERSHIP_COLUMNS = ["business_id", "category"]


def split_categories(categories: Optional[str], delimiter: str = ",") -> List[str]:
    """
    Split a delimited category string into trimmed, non-empty tokens.

    >>> split_categories("Food, Restaurants,, Bars ")
    ['Food', 'Restaurants', 'Bars']
    """
    if not categories or not isinstance(categories, str):
        return []
    return [token.strip() for token in categories.split(delimiter) if token.strip()]


def explode_categories(businesses: pd.DataFrame, delimiter: str = ",") -> pd.DataFrame:
    """
    Build the category membership relation for a businesses table.

    Args:
        businesses: DataFrame with business_id and categories columns
        delimiter: Category separator

    Returns:
        DataFrame with one (business_id, category) row per token; businesses
        without categories contribute no rows
    """
    rows = [
        (business_id, category)
        for business_id, categories in zip(businesses["business_id"], businesses["categories"])
        for category in split_categories(categories, delimiter)
    ]
    return pd.DataFrame(rows, columns=MEMBERSHIP_COLUMNS)
