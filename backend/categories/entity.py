from dataclasses import dataclass


@dataclass
class Category:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
