"""Generic in-memory registry of attribute records keyed by string ID."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from shop_reports.exceptions import DuplicateItemError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SORT_KEYS = ("priority", "id")


class Registry:
    """Keyed store of item attribute records.

    Items keep their registration order; ``get_items_sorted`` uses a stable
    sort so that equal keys stay in that order.
    """

    # Noun used in error messages, e.g. "The 'sales' report does not exist."
    item_error_label = "item"

    def __init__(self) -> None:
        self._items: dict[str, dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def add_item(self, item_id: str, attributes: dict[str, Any], overwrite: bool = False) -> bool:
        """Store ``attributes`` under ``item_id``.

        Raises:
            ValidationError: if the ID or the attributes are empty.
            DuplicateItemError: if the ID exists and ``overwrite`` is false.
        """
        if not item_id or not isinstance(item_id, str):
            raise ValidationError(f"The {self.item_error_label} ID must be a non-empty string.")

        if not attributes:
            raise ValidationError(
                f"The attributes for the '{item_id}' {self.item_error_label} are missing or invalid."
            )

        if item_id in self._items and not overwrite:
            raise DuplicateItemError(
                f"The '{item_id}' {self.item_error_label} is already registered."
            )

        self._items[item_id] = attributes
        logger.debug("Registered %s '%s'", self.item_error_label, item_id)
        return True

    def get_item(self, item_id: str) -> dict[str, Any]:
        if item_id not in self._items:
            raise NotFoundError(f"The '{item_id}' {self.item_error_label} does not exist.")
        return _copy_record(self._items[item_id])

    def remove_item(self, item_id: str) -> None:
        """Remove an item. Removing an unknown ID is a no-op."""
        if self._items.pop(item_id, None) is not None:
            logger.debug("Removed %s '%s'", self.item_error_label, item_id)

    def exists(self, item_id: str) -> bool:
        return item_id in self._items

    def get_items(self) -> list[dict[str, Any]]:
        return [_copy_record(item) for item in self._items.values()]

    def get_items_sorted(self, sort: str = "") -> list[dict[str, Any]]:
        """Return all items ordered by ``sort`` ("priority" or "id").

        Any other value returns registration order.
        """
        items = self.get_items()
        if sort == "priority":
            return sorted(items, key=lambda item: item.get("priority", 10))
        if sort == "id":
            return sorted(items, key=lambda item: item.get("id", ""))
        return items

    def validate_attributes(
        self,
        attributes: dict[str, Any],
        item_id: str,
        required: Iterable[str],
    ) -> None:
        """Raise ValidationError for the first ``required`` attribute that is empty."""
        for name in required:
            if not attributes.get(name):
                raise ValidationError(
                    f"The '{name}' attribute of the '{item_id}' {self.item_error_label} "
                    "is missing or empty."
                )

    def validate_priority(self, attributes: dict[str, Any], item_id: str) -> None:
        """Raise ValidationError unless ``priority`` is an integer."""
        priority = attributes.get("priority")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise ValidationError(
                f"The priority of the '{item_id}' {self.item_error_label} must be an integer, "
                f"got {priority!r}."
            )


def _copy_record(record: dict[str, Any]) -> dict[str, Any]:
    """Copy a record one container level deep; stored records are never handed out."""
    copied: dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = {k: list(v) if isinstance(v, list) else v for k, v in value.items()}
        copied[key] = value
    return copied
