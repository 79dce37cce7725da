"""Pagination response header."""

from fastapi import Response

from members_api.api.schemas import PaginationHeader
from members_api.domain.pagination import PagedResult

PAGINATION_HEADER = "Pagination"


def add_pagination_header(response: Response, page: PagedResult) -> None:
    """Write the paging metadata of `page` into the response headers."""
    header = PaginationHeader(
        current_page=page.current_page,
        items_per_page=page.page_size,
        total_items=page.total_count,
        total_pages=page.total_pages,
    )
    response.headers[PAGINATION_HEADER] = header.model_dump_json(by_alias=True)
    response.headers["Access-Control-Expose-Headers"] = PAGINATION_HEADER
