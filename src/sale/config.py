"""Sale Config — конфигурация продажи при создании.

Источники:
- SaleConfig.build(**values)         — значения уже в базовых единицах / Wad
- SaleConfig.from_document(document) — JSON документ (десятичные строки),
  валидируется по схеме sale_config (jsonschema), затем конвертируется
- load_sale_config(path)             — то же из файла

Любая ошибка → InvalidConfiguration; частично созданной конфигурации нет.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from jsonschema import ValidationError as SchemaValidationError
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.contracts import validate_sale_config
from src.core.domain.curve import CurveParameters
from src.core.domain.identity import validate_identity
from src.core.domain.rails import MAX_BPS_TOTAL, RevenueRails
from src.core.math.fixed_point import to_wad

from .asset_ledger import NATIVE_ASSET
from .errors import InvalidConfiguration


class SaleConfig(BaseModel):
    """Конфигурация экземпляра продажи."""

    owner: str = Field(..., description="Оператор (access control)")
    sale_token: str = Field(..., description="Продаваемый ресурс (идентификатор актива)")
    sale_account: str = Field(..., description="Счёт продажи в реестре активов")
    sale_supply: int = Field(..., gt=0, description="Объём продажи (базовые единицы)")
    curve: CurveParameters = Field(..., description="Начальные параметры кривой")
    fund_treasury: str = Field(..., description="Бенефициар fund-доли")
    share_treasury: str = Field(..., description="Бенефициар share-доли")
    fund_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL)
    share_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL)
    referrer_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL)

    model_config = {"frozen": True}

    @field_validator("owner", "sale_token", "sale_account", "fund_treasury", "share_treasury")
    @classmethod
    def validate_identities(cls, v: str, info) -> str:
        return validate_identity(v, info.field_name)

    @field_validator("sale_token")
    @classmethod
    def validate_not_native(cls, v: str) -> str:
        """Продаваемый ресурс не может совпадать с валютой платежа."""
        if v == NATIVE_ASSET:
            raise ValueError(f"sale_token must differ from the payment asset {NATIVE_ASSET!r}")
        return v

    @field_validator("referrer_bps")
    @classmethod
    def validate_total_bps(cls, v: int, info) -> int:
        total = info.data.get("fund_bps", 0) + info.data.get("share_bps", 0) + v
        if total > MAX_BPS_TOTAL:
            raise ValueError(f"bps total {total} exceeds {MAX_BPS_TOTAL} (100%)")
        return v

    def rails(self) -> RevenueRails:
        """Начальные rails."""
        return RevenueRails(
            fund_treasury=self.fund_treasury,
            share_treasury=self.share_treasury,
            fund_bps=self.fund_bps,
            share_bps=self.share_bps,
            referrer_bps=self.referrer_bps,
        )

    @classmethod
    def build(cls, **values: Any) -> "SaleConfig":
        """Создание из готовых значений.

        Raises:
            InvalidConfiguration: при любой ошибке валидации
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidConfiguration(f"invalid sale configuration: {e}") from e

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "SaleConfig":
        """Создание из JSON документа sale_config.

        Raises:
            InvalidConfiguration: документ не соответствует схеме или инвариантам
        """
        data: Dict[str, Any] = dict(document)
        try:
            validate_sale_config(data)
        except SchemaValidationError as e:
            raise InvalidConfiguration(f"sale_config schema violation: {e.message}") from e

        curve = {name: to_wad(value) for name, value in data["curve"].items()}

        return cls.build(
            owner=data["owner"],
            sale_token=data["sale_token"],
            sale_account=data["sale_account"],
            sale_supply=to_wad(data["sale_supply"]),
            curve=curve,
            fund_treasury=data["fund_treasury"],
            share_treasury=data["share_treasury"],
            fund_bps=data.get("fund_bps", 0),
            share_bps=data.get("share_bps", 0),
            referrer_bps=data.get("referrer_bps", 0),
        )


def load_sale_config(path: str | Path) -> SaleConfig:
    """Загрузка SaleConfig из JSON файла.

    Raises:
        InvalidConfiguration: файл не JSON, не соответствует схеме или инвариантам
        FileNotFoundError: файл не найден
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidConfiguration(f"{path}: not valid JSON: {e}") from e

    return SaleConfig.from_document(document)
