"""
Wire schema for documents submitted to the CRPT registry.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DocumentFormat(str, Enum):
    """Transfer format of the document body."""

    MANUAL = "MANUAL"  # JSON
    XML = "XML"
    CSV = "CSV"


class DocumentType(str, Enum):
    LP_INTRODUCE_GOODS = "LP_INTRODUCE_GOODS"
    LP_INTRODUCE_GOODS_CSV = "LP_INTRODUCE_GOODS_CSV"
    LP_INTRODUCE_GOODS_XML = "LP_INTRODUCE_GOODS_XML"


class ProductionType(str, Enum):
    OWN_PRODUCTION = "OWN_PRODUCTION"
    CONTRACT_PRODUCTION = "CONTRACT_PRODUCTION"


class ProductGroup(Enum):
    """Product groups known to the registry, as (query code, numeric id)."""

    CLOTHES = ("clothes", 1)
    SHOES = ("shoes", 2)
    TOBACCO = ("tobacco", 3)
    PERFUMERY = ("perfumery", 4)
    TIRES = ("tires", 5)
    ELECTRONICS = ("electronics", 6)
    PHARMA = ("pharma", 7)
    MILK = ("milk", 8)
    BICYCLE = ("bicycle", 9)
    WHEELCHAIRS = ("wheelchairs", 10)

    def __init__(self, code: str, group_id: int) -> None:
        self.code = code
        self.group_id = group_id

    @classmethod
    def from_value(cls, value: Union[str, int, "ProductGroup"]) -> "ProductGroup":
        """Look up a group by its query code, numeric id or member name."""
        if isinstance(value, cls):
            return value
        for group in cls:
            if value in (group.code, group.group_id) or (isinstance(value, str) and value.upper() == group.name):
                return group
        raise ValueError(f"Unknown product group: {value!r}")


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)


class DocumentDescription(_WireModel):
    participant_inn: Optional[str] = Field(default=None, alias="participantInn")


class Product(_WireModel):
    certificate_document: Optional[str] = None
    certificate_document_date: Optional[date] = None
    certificate_document_number: Optional[str] = None
    owner_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[date] = None
    tnved_code: Optional[str] = None
    uit_code: Optional[str] = None
    uitu_code: Optional[str] = None


class Document(_WireModel):
    """Body of an "introduce goods" document."""

    description: Optional[DocumentDescription] = None
    id: Optional[str] = Field(default=None, alias="doc_id")
    status: Optional[str] = Field(default=None, alias="doc_status")
    type: Optional[str] = Field(default=None, alias="doc_type")
    owner_inn: Optional[str] = None
    participant_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[date] = None
    production_type: Optional[ProductionType] = None
    products: List[Product] = Field(default_factory=list)
    reg_date: Optional[date] = None
    reg_number: Optional[str] = None


class DocumentCreateRequest(_WireModel):
    """Envelope POSTed to ``/lk/documents/create``."""

    document_format: DocumentFormat
    product_document: Document
    signature: str
    type: DocumentType

    def to_json(self) -> str:
        """Serialize with wire field names; unset optional fields are omitted."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
