from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Upstream catalogs are loose about scalar types ("1" vs 1); keep whatever
# type arrived so forwarded payloads serialize back unchanged.
Scalar = Union[str, bool, int, float, None]

CODE_OK = 1
CODE_EMPTY = 0
MSG_OK = "数据列表"


class CatalogEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    vod_id: Scalar = None
    vod_name: Scalar = None
    vod_pic: Scalar = None
    vod_remarks: Scalar = None
    vod_year: Scalar = None
    type_name: Scalar = None
    vod_content: Scalar = None
    vod_play_from: Scalar = None
    vod_play_url: Scalar = None

    def dump(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        for key, value in (self.model_extra or {}).items():
            data.setdefault(key, value)
        return data


class CatalogEnvelope(BaseModel):
    """
    Catalog protocol envelope `{code, msg, page, pagecount, limit, total, list}`.

    Serialize with `dump()` so only fields that were set (or arrived from an
    upstream) appear in the output.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    code: Scalar = CODE_OK
    msg: Scalar = MSG_OK
    page: Scalar = 1
    pagecount: Scalar = 1
    limit: Scalar = 0
    total: Scalar = 0
    entries: Optional[List[CatalogEntry]] = Field(default=None, alias="list")

    def dump(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_unset=True, exclude={"entries"})
        for key, value in (self.model_extra or {}).items():
            data.setdefault(key, value)
        if "entries" in self.model_fields_set:
            data["list"] = (
                None if self.entries is None else [entry.dump() for entry in self.entries]
            )
        return data

    @classmethod
    def listing(cls, entries: List[CatalogEntry]) -> "CatalogEnvelope":
        """Success envelope for a single, unpaginated page of entries."""
        count = len(entries)
        return cls(
            code=CODE_OK,
            msg=MSG_OK,
            page=1,
            pagecount=1,
            limit=count,
            total=count,
            entries=entries,
        )

    @classmethod
    def empty(cls, msg: str) -> "CatalogEnvelope":
        """Success-shaped envelope signalling a catalog-level absence."""
        return cls(code=CODE_EMPTY, msg=msg, entries=[])


class ErrorBody(BaseModel):
    error: str
    details: Optional[str] = None
