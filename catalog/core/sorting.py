"""Safelisted sort resolution for collection endpoints.

Sorting:
    - `?sort=name` - Ascending by column
    - `?sort=-name` - Descending (prefix with `-`)

Only tokens listed verbatim in the resource's safelist are accepted. The
safelist is passed in by each router; there is no global registry.
"""

from dataclasses import dataclass
from typing import Literal

from catalog.core.errors import UnsafeSortInputError

SortDirection = Literal["ASC", "DESC"]


@dataclass(frozen=True)
class SortSpec:
    """A resolved, safelisted sort.

    Attributes:
        column: Column name with any leading `-` removed.
        direction: "ASC" or "DESC".
    """

    column: str
    direction: SortDirection

    @property
    def descending(self) -> bool:
        """True when rows should be ordered high-to-low."""
        return self.direction == "DESC"


def is_permitted(sort_token: str, safelist: tuple[str, ...]) -> bool:
    """Check whether a sort token appears verbatim in the safelist."""
    return sort_token in safelist


def resolve(sort_token: str, safelist: tuple[str, ...]) -> SortSpec:
    """Resolve a client-supplied sort token against a safelist.

    Args:
        sort_token: Raw `sort` query value (e.g., "-name").
        safelist: Permitted tokens, both ascending and `-` prefixed forms.

    Returns:
        SortSpec with the column name and direction.

    Raises:
        UnsafeSortInputError: If the token is not in the safelist.

    Examples:
        >>> resolve("-name", ("name", "-name"))
        SortSpec(column='name', direction='DESC')
    """
    if not is_permitted(sort_token, safelist):
        raise UnsafeSortInputError(sort_token)

    if sort_token.startswith("-"):
        return SortSpec(column=sort_token[1:], direction="DESC")
    return SortSpec(column=sort_token, direction="ASC")


def with_descending(*columns: str) -> tuple[str, ...]:
    """Build a safelist holding each column in ascending and descending form.

    Examples:
        >>> with_descending("id", "name")
        ('id', 'name', '-id', '-name')
    """
    return (*columns, *(f"-{column}" for column in columns))
