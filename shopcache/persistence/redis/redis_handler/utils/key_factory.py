from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger("RedisKeyFactory")

NO_SEARCH = "none"
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"


# Characters removed by String.prototype.trim in the other services sharing
# these keys. str.strip() differs: it keeps U+FEFF and drops U+001C-U+001F, U+0085.
JS_WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def normalize_term(term: str) -> str:
    """Lower-case and trim a key component the way the other services do."""
    return term.lower().strip(JS_WHITESPACE)


def normalize_search(search: str | None) -> str:
    """
    Fold a search term into its key form.

    Lower-cased and trimmed; an absent or blank term becomes ``"none"``.
    Idempotent: normalize_search(normalize_search(s)) == normalize_search(s).
    """
    if search is None:
        return NO_SEARCH
    folded = normalize_term(search)
    return folded or NO_SEARCH


class KeyKind(str, Enum):
    """Shape of the cached value a key points at."""

    ENTITY = "entity"  # single projection, flag or counter
    LIST = "list"  # one page of projections
    COUNT = "count"  # total matching a search/sort


class CacheKey(BaseModel):
    """
    A cache key before serialization.

    ENTITY keys concatenate their field values directly after the prefix;
    LIST and COUNT keys render as ``name:value`` pairs joined by ``:``.
    """

    model_config = ConfigDict(frozen=True)

    prefix: str
    kind: KeyKind
    fields: tuple[tuple[str, str], ...] = ()

    def render(self) -> str:
        if self.kind is KeyKind.ENTITY:
            return self.prefix + "".join(value for _, value in self.fields)
        return self.prefix + ":".join(f"{name}:{value}" for name, value in self.fields)

    def __str__(self) -> str:
        return self.render()


class KeyFactory(BaseModel):
    """Pure stateless key builders for one domain prefix."""

    prefix: str = Field(..., min_length=1)
    count_prefix: str = ""

    @model_validator(mode="after")
    def _default_count_prefix(self) -> KeyFactory:
        if not self.count_prefix:
            self.count_prefix = f"{self.prefix}count:"
        return self

    # ---- builders ---------------------------------------------------------
    def entity(self, *parts: object) -> str:
        """``<prefix><part><part>...`` for single-subject lookups."""
        fields = tuple(("", str(p)) for p in parts)
        return CacheKey(prefix=self.prefix, kind=KeyKind.ENTITY, fields=fields).render()

    def page(
        self,
        page: int,
        limit: int,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> str:
        """``<prefix>page:<p>:limit:<l>:search:<norm>:sort:<by>:<order>``"""
        return CacheKey(
            prefix=self.prefix,
            kind=KeyKind.LIST,
            fields=(
                ("page", str(page)),
                ("limit", str(limit)),
                ("search", normalize_search(search)),
                ("sort", f"{sort_by}:{sort_order}"),
            ),
        ).render()

    def count(
        self,
        search: str | None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: str = DEFAULT_SORT_ORDER,
    ) -> str:
        """``<count_prefix>search:<norm>:sort:<by>:<order>``"""
        return CacheKey(
            prefix=self.count_prefix,
            kind=KeyKind.COUNT,
            fields=(
                ("search", normalize_search(search)),
                ("sort", f"{sort_by}:{sort_order}"),
            ),
        ).render()

    def is_count_key(self, key: str) -> bool:
        return key.startswith(self.count_prefix)

    def is_list_key(self, key: str) -> bool:
        return key.startswith(self.prefix) and not self.is_count_key(key)
