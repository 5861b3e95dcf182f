"""Spoken descriptions of storefront products."""

from typing import Any, Mapping


def _format_price(price: Any) -> str:
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        return str(int(price)) if float(price).is_integer() else f"{price:.2f}"
    return str(price)


def format_product_narration(product: Mapping[str, Any]) -> str:
    """Build the narration text for a product.

    Args:
        product: Mapping with ``name``, ``description``, ``price`` and
            optionally ``sizes``, ``inStock``/``in_stock`` and ``rating``

    Returns:
        Text ready to be passed to NarratorSession.synthesize()

    Example:
        >>> format_product_narration(
        ...     {"name": "Tee", "description": "Soft cotton.", "price": 20, "inStock": True}
        ... )
        'Tee. Soft cotton. This product costs $20. This item is currently in stock.'
    """
    in_stock = product.get("inStock", product.get("in_stock", False))

    narration = f"{product.get('name', '')}. "
    narration += f"{product.get('description', '')} "
    narration += f"This product costs ${_format_price(product.get('price', ''))}. "

    sizes = product.get("sizes") or []
    if sizes:
        narration += f"Available in sizes: {', '.join(str(size) for size in sizes)}. "

    narration += (
        "This item is currently in stock."
        if in_stock
        else "Sorry, this item is currently out of stock."
    )

    if product.get("rating"):
        narration += f" Customer rating: {product['rating']} out of 5 stars."

    return narration
