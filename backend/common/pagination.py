from typing import Any, Dict, List, Mapping, Tuple

from .errors import InvalidRequest


def parse_pagination(args: Mapping[str, str], default_limit: int) -> Tuple[int, int]:
    try:
        page = int(args.get("page", 1))
        limit = int(args.get("limit", default_limit))
    except (TypeError, ValueError):
        raise InvalidRequest("page and limit must be integers")
    if page < 1 or limit < 1:
        raise InvalidRequest("page and limit must be positive")
    return page, limit


def page_dict(items: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "data": [item.to_dict() for item in items],
        "total": total,
        "page": page,
        "limit": limit,
    }
