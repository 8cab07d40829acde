"""Lookup of static hints for observed entity classnames.

Entity classnames (as seen in maps) are linked to engine classes; hints are
keyed by engine class. A hint lookup for an entity walks its class first,
then its ancestors:

- ``direct``: the bases listed on the class itself (one hop)
- ``transitive``: breadth-first closure over all bases, cycle-safe
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from entschema.config.models import InheritanceMode
from entschema.inference.types import SemanticType
from entschema.sdk.models import EntityLink, InheritEdge, SourceHint


class SdkIndex:
    """Immutable view over one static-analysis pass."""

    def __init__(
        self,
        links: Iterable[EntityLink] = (),
        inherits: Iterable[InheritEdge] = (),
        hints: Iterable[SourceHint] = (),
        inheritance: InheritanceMode = "direct",
    ) -> None:
        self._inheritance = inheritance

        self._class_for_entity: dict[str, str] = {}
        for link in links:
            self._class_for_entity.setdefault(link.entity, link.class_name)

        self._bases: dict[str, list[str]] = {}
        for edge in inherits:
            self._bases.setdefault(edge.class_name, []).extend(edge.bases)

        self._hints: dict[str, list[SourceHint]] = {}
        for hint in hints:
            self._hints.setdefault(hint.class_name, []).append(hint)

    def class_for_entity(self, entity: str) -> str | None:
        return self._class_for_entity.get(entity)

    def ancestors(self, class_name: str) -> list[str]:
        """Ancestors in lookup order, without duplicates or ``class_name`` itself."""
        if self._inheritance == "direct":
            direct = self._bases.get(class_name, [])
            return list(dict.fromkeys(b for b in direct if b != class_name))

        seen = {class_name}
        order: list[str] = []
        queue = deque(self._bases.get(class_name, []))
        while queue:
            base = queue.popleft()
            if base in seen:
                continue
            seen.add(base)
            order.append(base)
            queue.extend(self._bases.get(base, []))
        return order

    def hints_for_class(self, class_name: str) -> dict[str, list[SemanticType]]:
        """Hinted types per property: own class first, then ancestors.

        Conflicting hints for one property are all kept, in lookup order.
        """
        types: dict[str, list[SemanticType]] = {}
        for owner in [class_name, *self.ancestors(class_name)]:
            for hint in self._hints.get(owner, []):
                hinted = types.setdefault(hint.property_name, [])
                if hint.semantic_type not in hinted:
                    hinted.append(hint.semantic_type)
        return types

    def hints_for_entity(self, entity: str) -> dict[str, list[SemanticType]]:
        class_name = self.class_for_entity(entity)
        if class_name is None:
            return {}
        return self.hints_for_class(class_name)
