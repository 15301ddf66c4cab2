"""Page envelopes returned by list endpoints."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class PaginatedPage(BaseModel):
    """Standard ``{count, next, previous, results}`` envelope."""
    kind: Literal["paginated"] = "paginated"
    results: list[Any] = Field(default_factory=list)
    next: Optional[str] = None
    count: Optional[int] = None

    @property
    def items(self) -> list[Any]:
        return self.results


class ListPage(BaseModel):
    """Bare JSON array: the whole collection in one response."""
    kind: Literal["list"] = "list"
    data: list[Any] = Field(default_factory=list)

    @property
    def items(self) -> list[Any]:
        return self.data

    @property
    def next(self) -> None:
        return None


class SinglePage(BaseModel):
    """A lone object where a collection was expected."""
    kind: Literal["single"] = "single"
    item: Any = None

    @property
    def items(self) -> list[Any]:
        return [self.item]

    @property
    def next(self) -> None:
        return None


Page = Annotated[Union[PaginatedPage, ListPage, SinglePage], Field(discriminator="kind")]


def normalize_response(data: Any) -> Union[PaginatedPage, ListPage, SinglePage]:
    """Resolve any of the three response shapes into a Page."""
    if isinstance(data, Mapping) and isinstance(data.get("results"), list):
        next_url = data.get("next")
        count = data.get("count")
        return PaginatedPage(
            results=data["results"],
            next=str(next_url) if next_url else None,
            count=count if isinstance(count, int) else None,
        )
    if isinstance(data, list):
        return ListPage(data=data)
    if data is None:
        return ListPage()
    return SinglePage(item=data)


@dataclass
class PaginationResult:
    """Items gathered by a pagination walk and why the walk stopped."""
    items: list[Any] = field(default_factory=list)
    pages_fetched: int = 0
    error: Optional[BaseException] = None
    truncated: bool = False

    @property
    def complete(self) -> bool:
        return self.error is None and not self.truncated

    @property
    def failed(self) -> bool:
        """True when the very first page could not be fetched."""
        return self.error is not None and self.pages_fetched == 0
