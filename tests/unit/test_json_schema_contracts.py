"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов
- Детекция нарушений constraints (min/max/pattern/additionalProperties)
- Интеграция с Pydantic моделями событий
"""

import copy

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    PurchaseEventValidator,
    SaleConfigValidator,
    SchemaLoader,
    validate_purchase_event,
    validate_sale_config,
)
from src.core.domain import PurchaseCompleted


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_sale_config():
    """Валидный sale_config для тестирования."""
    return {
        "schema_version": "1",
        "owner": "governance",
        "sale_token": "RESOURCE",
        "sale_account": "sale",
        "sale_supply": "1000000",
        "curve": {
            "p0": "0.0001",
            "p1": "0.01",
            "k": "0.05",
            "r0": "0.2",
            "alpha": "0.5",
        },
        "fund_treasury": "fund",
        "share_treasury": "share",
        "fund_bps": 500,
        "share_bps": 300,
        "referrer_bps": 200,
    }


@pytest.fixture
def valid_purchase_event():
    """Валидный purchase_event для тестирования."""
    return {
        "event_type": "PurchaseCompleted",
        "sequence": 3,
        "buyer": "alice",
        "exact_cost": 900000000000000000,
        "tokens_out": 8800000000000000000000,
        "reward_out": 150000000000000000000,
        "new_tokens_sold": 8800000000000000000000,
        "fund_cut": 50000000000000000,
        "share_cut": 30000000000000000,
        "referral_cut": 20000000000000000,
        "referrer": "bob",
        "refund": 0,
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_all_schemas():
    """Проверка загрузки всех схем."""
    loader = SchemaLoader()

    sale_config_schema = loader.load_schema("sale_config")
    purchase_event_schema = loader.load_schema("purchase_event")

    assert sale_config_schema["title"] == "sale_config"
    assert purchase_event_schema["properties"]["event_type"]["const"] == "PurchaseCompleted"


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("sale_config")
    schema2 = loader.load_schema("sale_config")

    # Должен вернуть тот же объект (кэш)
    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_raises_on_missing_directory(tmp_path):
    """Проверка ошибки при отсутствующем каталоге схем."""
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(tmp_path / "missing")


def test_schema_loader_rejects_invalid_schema(tmp_path):
    """Схема, не проходящая meta-валидацию, отклоняется."""
    (tmp_path / "broken.json").write_text('{"type": 42}', encoding="utf-8")
    loader = SchemaLoader(tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema"):
        loader.load_schema("broken")


# =============================================================================
# TESTS - SALE CONFIG VALIDATION
# =============================================================================


def test_sale_config_validator_accepts_valid_data(valid_sale_config):
    """Валидация правильного sale_config."""
    validator = SaleConfigValidator()
    validator.validate(valid_sale_config)  # Не должно выбросить исключение
    assert validator.is_valid(valid_sale_config)


def test_sale_config_validate_function(valid_sale_config):
    """Проверка функции validate_sale_config."""
    validate_sale_config(valid_sale_config)  # Не должно выбросить исключение


def test_sale_config_bps_optional(valid_sale_config):
    """Ставки rails необязательны (default 0)."""
    data = copy.deepcopy(valid_sale_config)
    del data["fund_bps"]
    del data["share_bps"]
    del data["referrer_bps"]

    validate_sale_config(data)


def test_sale_config_rejects_missing_required_field(valid_sale_config):
    """Валидация отклоняет данные без обязательных полей."""
    data = copy.deepcopy(valid_sale_config)
    del data["sale_token"]

    with pytest.raises(ValidationError) as exc_info:
        validate_sale_config(data)
    assert "'sale_token' is a required property" in str(exc_info.value)


def test_sale_config_rejects_missing_curve_field(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    del data["curve"]["alpha"]

    with pytest.raises(ValidationError) as exc_info:
        validate_sale_config(data)
    assert "'alpha' is a required property" in str(exc_info.value)


def test_sale_config_rejects_float_scalars(valid_sale_config):
    """Десятичные значения — строки, float запрещён."""
    data = copy.deepcopy(valid_sale_config)
    data["curve"]["p0"] = 0.0001

    with pytest.raises(ValidationError) as exc_info:
        validate_sale_config(data)
    assert "is not of type 'string'" in str(exc_info.value)


@pytest.mark.parametrize("value", ["1e-4", "-0.1", ".5", "0.0000000000000000001", "abc"])
def test_sale_config_rejects_malformed_decimal(valid_sale_config, value):
    data = copy.deepcopy(valid_sale_config)
    data["curve"]["k"] = value

    validator = SaleConfigValidator()
    assert not validator.is_valid(data)


def test_sale_config_rejects_bps_above_10000(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    data["fund_bps"] = 10_001

    with pytest.raises(ValidationError):
        validate_sale_config(data)


def test_sale_config_rejects_negative_bps(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    data["share_bps"] = -1

    with pytest.raises(ValidationError):
        validate_sale_config(data)


def test_sale_config_rejects_unknown_field(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    data["mint_on_demand"] = True

    with pytest.raises(ValidationError) as exc_info:
        validate_sale_config(data)
    assert "Additional properties are not allowed" in str(exc_info.value)


def test_sale_config_rejects_wrong_schema_version(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    data["schema_version"] = "2"

    with pytest.raises(ValidationError):
        validate_sale_config(data)


def test_sale_config_rejects_empty_identity(valid_sale_config):
    data = copy.deepcopy(valid_sale_config)
    data["owner"] = ""

    with pytest.raises(ValidationError):
        validate_sale_config(data)


def test_sale_config_collects_all_errors(valid_sale_config):
    """iter_errors возвращает все нарушения разом."""
    data = copy.deepcopy(valid_sale_config)
    del data["owner"]
    data["fund_bps"] = 20_000

    errors = list(SaleConfigValidator().iter_errors(data))
    assert len(errors) == 2


# =============================================================================
# TESTS - PURCHASE EVENT VALIDATION
# =============================================================================


def test_purchase_event_validator_accepts_valid_data(valid_purchase_event):
    """Валидация правильного purchase_event."""
    validator = PurchaseEventValidator()
    validator.validate(valid_purchase_event)
    assert validator.is_valid(valid_purchase_event)


def test_purchase_event_accepts_null_referrer(valid_purchase_event):
    data = dict(valid_purchase_event)
    data["referrer"] = None
    data["referral_cut"] = 0

    validate_purchase_event(data)


def test_purchase_event_rejects_zero_tokens_out(valid_purchase_event):
    data = dict(valid_purchase_event)
    data["tokens_out"] = 0

    with pytest.raises(ValidationError):
        validate_purchase_event(data)


def test_purchase_event_rejects_negative_refund(valid_purchase_event):
    data = dict(valid_purchase_event)
    data["refund"] = -1

    with pytest.raises(ValidationError):
        validate_purchase_event(data)


def test_purchase_event_rejects_wrong_event_type(valid_purchase_event):
    data = dict(valid_purchase_event)
    data["event_type"] = "CurveUpdated"

    with pytest.raises(ValidationError):
        validate_purchase_event(data)


def test_purchase_event_rejects_missing_field(valid_purchase_event):
    data = dict(valid_purchase_event)
    del data["exact_cost"]

    with pytest.raises(ValidationError) as exc_info:
        validate_purchase_event(data)
    assert "'exact_cost' is a required property" in str(exc_info.value)


# =============================================================================
# TESTS - PYDANTIC INTEGRATION
# =============================================================================


def test_purchase_completed_model_matches_contract():
    """Сериализованное событие PurchaseCompleted соответствует контракту."""
    event = PurchaseCompleted(
        sequence=7,
        buyer="alice",
        exact_cost=10**18,
        tokens_out=9_764 * 10**18,
        reward_out=12 * 10**18,
        new_tokens_sold=9_764 * 10**18,
        fund_cut=0,
        share_cut=0,
        referral_cut=0,
        referrer=None,
        refund=0,
    )

    validate_purchase_event(event.to_contract())
