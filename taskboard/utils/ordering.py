"""
Ordering helpers shared by the REST backend and the board client.

Positions are plain integers; after any reorder the positions inside one
parent are exactly ``0..N-1``.
"""


def array_move(items, old_index, new_index):
    """Return a new list with the item at ``old_index`` moved to ``new_index``.

    Negative or out-of-range ``new_index`` values are clamped to the list
    bounds, the same way inserting past the end appends.
    """
    items = list(items)
    if not items:
        return items
    item = items.pop(old_index)
    new_index = max(0, min(new_index, len(items)))
    items.insert(new_index, item)
    return items


def sort_by_order(items, key=lambda item: item.order):
    """Stable sort by position; items without a position keep their place last."""
    return sorted(items, key=lambda item: (key(item) is None, key(item) or 0))


def positions(ids):
    """Map each identifier to its index in ``ids``."""
    return {item_id: index for index, item_id in enumerate(ids)}
