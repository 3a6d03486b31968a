from dataclasses import dataclass, field
from typing import List


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: str
    ingredients: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "ingredients": list(self.ingredients)}


__all__ = ["Recipe"]
