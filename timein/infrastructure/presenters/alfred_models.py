"""Alfred Script Filter JSON model.

Only the fields the workflow uses are modelled; empty optional fields are
left out of the serialized output, as Alfred expects.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CacheConfig:
    seconds: int
    loosereload: Optional[bool] = None


@dataclass
class Item:
    """A single row in Alfred's result list."""
    title: str
    subtitle: str = ""
    arg: Optional[str] = None
    uid: str = ""
    valid: Optional[bool] = None
    autocomplete: str = ""
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ScriptFilterOutput:
    items: List[Item] = field(default_factory=list)
    cache: Optional[CacheConfig] = None
    variables: Dict[str, Any] = field(default_factory=dict)

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def to_dict(self) -> Dict[str, Any]:
        data = _drop_empty(asdict(self))
        # "items" is mandatory even when there are none
        data.setdefault("items", [])
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def _drop_empty(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: _drop_empty(v)
            for k, v in value.items()
            if v is not None and v != "" and v != {} and v != []
        }
    if isinstance(value, list):
        return [_drop_empty(v) for v in value]
    return value
