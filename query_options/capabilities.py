"""Declared query capability sets."""
from dataclasses import dataclass
from typing import Dict, Optional

FILTER = "$filter"
ORDERBY = "$orderby"
SELECT = "$select"
EXPAND = "$expand"
COUNT = "$count"
TOP = "$top"
SKIP = "$skip"

SUPPORTED_OPTIONS = (FILTER, ORDERBY, SELECT, EXPAND, COUNT, TOP, SKIP)


@dataclass(frozen=True)
class QueryCapabilities:
    """Which query options a client may apply to a collection. max_top=None means unbounded."""

    filter: bool = True
    orderby: bool = True
    select: bool = True
    expand: bool = True
    count: bool = True
    top: bool = True
    skip: bool = True
    max_top: Optional[int] = None

    def as_dict(self) -> Dict[str, bool]:
        return {
            FILTER: self.filter,
            ORDERBY: self.orderby,
            SELECT: self.select,
            EXPAND: self.expand,
            COUNT: self.count,
            TOP: self.top,
            SKIP: self.skip,
        }

    def allows(self, option: str) -> bool:
        return self.as_dict().get(option, False)
