from typing import Any, Awaitable, Callable, List, Optional, Tuple

from recstore_ddb.types import Record

Cursor = Optional[Any]
FetchPage = Callable[[Cursor], Awaitable[Tuple[List[Record], Cursor]]]


async def drain(fetch_page: FetchPage) -> List[Record]:
    """Call ``fetch_page`` from the first page until no cursor comes back."""
    items: List[Record] = []
    cursor: Cursor = None
    while True:
        page, cursor = await fetch_page(cursor)
        items.extend(page)
        if not cursor:
            return items
