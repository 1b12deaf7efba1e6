from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class IndexerRecord:
    name: str
    protocol: str
    language: str
    description: str
    privacy: str
    categories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the serialized shape used by JSON output and the catalog API."""
        return {
            "name": self.name,
            "protocol": self.protocol,
            "language": self.language,
            "description": self.description,
            "privacy": self.privacy,
            "categories": list(self.categories),
        }
