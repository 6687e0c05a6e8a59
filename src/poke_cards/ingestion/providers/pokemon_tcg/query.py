from __future__ import annotations

from dataclasses import dataclass

SELECT_FIELDS = ("id", "name", "types", "hp", "rarity")


@dataclass(frozen=True)
class CardQuery:
    """Filtered, paginated /cards query.

    Only `limit` varies per run. The client always sends the defaults:
    `(types:fire OR types:grass) hp:[90 TO *] rarity:rare`.
    """

    limit: int
    card_types: tuple[str, ...] = ("fire", "grass")
    min_hp: int = 90
    rarity: str = "rare"
    page: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {self.limit!r}")
        # order kept, duplicates dropped
        object.__setattr__(self, "card_types", tuple(dict.fromkeys(self.card_types)))

    def search_expression(self) -> str:
        types = " OR ".join(f"types:{t}" for t in self.card_types)
        return f"({types}) hp:[{self.min_hp} TO *] rarity:{self.rarity}"

    def to_params(self) -> dict[str, str]:
        return {
            "q": self.search_expression(),
            "page": str(self.page),
            "pageSize": str(self.limit),
            "select": ",".join(SELECT_FIELDS),
            "orderBy": "id",
        }

