# runegather/models/element.py
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Element:
    """An atomic token of the runic matrix. Elements compare and hash by id only."""
    element_id: str
    name: str = field(default="", compare=False)
    icon: str = field(default="", compare=False)
    color: str = field(default="#ffffff", compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Element':
        element_id = str(data["id"])
        return cls(
            element_id=element_id,
            name=data.get("name") or element_id,
            icon=data.get("icon", ""),
            color=data.get("color", "#ffffff"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.element_id, "name": self.name, "icon": self.icon, "color": self.color}
