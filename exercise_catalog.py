from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

FALLBACK_CATEGORY = "Sonstige"

BUILTIN_CATALOG: Mapping[str, tuple[str, ...]] = {
    "Brust": ("Bankdrücken", "Brustpresse", "Flys"),
    "Rücken": ("Latzug", "Rudern"),
    "Arme": ("Bizeps Curls", "Trizeps Curls"),
    "Schultern": ("Schulterdrücken", "Seitheben"),
    "Beine": ("Kniebeugen", "Beinpresse", "Beinstrecker"),
}


class ExerciseCatalog:
    """Read-only view merging the built-in catalog with custom exercises.

    Built-in categories come first in their fixed order, followed by
    categories that only exist in ``custom``. Inside a category the built-in
    names come before the custom ones. A custom category sharing a built-in
    name extends it. Names repeated within a category are listed once.
    """

    def __init__(
        self,
        custom: Optional[Mapping[str, Sequence[str]]] = None,
        builtin: Mapping[str, Sequence[str]] = BUILTIN_CATALOG,
    ) -> None:
        self.builtin = builtin
        self.custom = custom or {}

    def as_dict(self) -> Dict[str, List[str]]:
        merged: Dict[str, List[str]] = {}
        for category, names in self.builtin.items():
            merged[category] = list(names)
        for category, names in self.custom.items():
            merged.setdefault(category, []).extend(names)
        return {c: list(dict.fromkeys(n)) for c, n in merged.items()}

    def categories(self) -> List[str]:
        return list(self.as_dict())

    def exercises(self, category: Optional[str] = None) -> List[str]:
        """Return exercise names for ``category`` or all names without duplicates."""
        merged = self.as_dict()
        if category is not None:
            return merged.get(category, [])
        names: List[str] = []
        for group in merged.values():
            names.extend(group)
        return list(dict.fromkeys(names))

    def category_for(self, exercise: str, default: str = FALLBACK_CATEGORY) -> str:
        """Return the first category listing ``exercise``."""
        for category, names in self.as_dict().items():
            if exercise in names:
                return category
        return default
