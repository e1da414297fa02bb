"""In-memory document root: attribute set plus rendered landmark elements."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from islandgate.exceptions import AttributeOwnershipError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Element:
    """A rendered element of the critical shell."""

    tag: str
    text: str = ""
    id: str | None = None
    attrs: dict[str, str] = field(default_factory=dict)


class Document:
    """Document root attributes with single-writer ownership.

    The first component to write an attribute becomes its owner; writes by
    any other component raise :class:`AttributeOwnershipError`. Attributes
    present before any write (server-rendered values) have no owner yet.
    ``mutation_count`` counts effective changes only, so a write of the
    current value is not a mutation.
    """

    def __init__(self, attributes: dict[str, str] | None = None) -> None:
        self._attributes: dict[str, str] = dict(attributes or {})
        self._owners: dict[str, str] = {}
        self._elements: list[Element] = []
        self.mutation_count = 0

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self._attributes)

    def get_attribute(self, name: str) -> str | None:
        return self._attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def owner_of(self, name: str) -> str | None:
        return self._owners.get(name)

    def _claim(self, name: str, writer: str) -> None:
        owner = self._owners.setdefault(name, writer)
        if owner != writer:
            raise AttributeOwnershipError(name, owner=owner, writer=writer)

    def set_attribute(self, name: str, value: str, *, owner: str) -> bool:
        """Set *name*; returns whether the document changed."""
        self._claim(name, owner)
        if self._attributes.get(name) == value:
            return False
        self._attributes[name] = value
        self.mutation_count += 1
        _logger.debug("Document attribute %s=%r by %s", name, value, owner)
        return True

    def remove_attribute(self, name: str, *, owner: str) -> bool:
        """Remove *name*; returns whether the document changed."""
        self._claim(name, owner)
        if name not in self._attributes:
            return False
        del self._attributes[name]
        self.mutation_count += 1
        _logger.debug("Document attribute %s removed by %s", name, owner)
        return True

    # ------------------------------------------------------------------
    # Rendered elements
    # ------------------------------------------------------------------

    def append(self, element: Element) -> None:
        self._elements.append(element)

    def query(self, tag: str) -> Element | None:
        for element in self._elements:
            if element.tag == tag:
                return element
        return None

    def query_all(self, tag: str) -> list[Element]:
        return [element for element in self._elements if element.tag == tag]

    def get_element_by_id(self, element_id: str) -> Element | None:
        for element in self._elements:
            if element.id == element_id:
                return element
        return None
