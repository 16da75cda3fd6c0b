"""Tests for the Promotion aggregate."""

from datetime import timedelta

import pytest
from protean.exceptions import ValidationError

from storefront.promotion.promotion import Promotion, PromotionType
from storefront.shared.clock import utcnow


def build(type=PromotionType.PERCENTAGE, value=10.0, **overrides):
    now = utcnow()
    fields = {
        "code": "save10",
        "name": "Ten off",
        "type": type.value,
        "value": value,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=1),
    }
    fields.update(overrides)
    return Promotion.create(**fields)


class TestCreation:
    def test_code_is_normalised(self):
        assert build(code="  save10 ").code == "SAVE10"

    def test_defaults(self):
        promotion = build()

        assert promotion.usage_count == 0
        assert promotion.minimum_order_amount == 0.0
        assert promotion.is_active is True

    def test_value_must_be_positive(self):
        with pytest.raises(ValidationError):
            build(value=0)

    def test_percentage_capped_at_hundred(self):
        with pytest.raises(ValidationError) as exc:
            build(value=150)
        assert "value" in exc.value.messages

    def test_window_must_be_ordered(self):
        now = utcnow()
        with pytest.raises(ValidationError) as exc:
            build(start_date=now, end_date=now - timedelta(hours=1))
        assert exc.value.messages["end_date"] == ["End date must be after start date"]


class TestApplicability:
    def test_running_inside_window(self):
        assert build().is_running()

    def test_not_running_before_start(self):
        now = utcnow()
        promotion = build(start_date=now + timedelta(days=1), end_date=now + timedelta(days=2))
        assert not promotion.is_running()

    def test_not_running_when_deactivated(self):
        promotion = build()
        promotion.is_active = False
        assert not promotion.is_running()

    def test_minimum_order_amount(self):
        promotion = build(minimum_order_amount=100.0)

        assert not promotion.applies_to(99.99)
        assert promotion.applies_to(100.0)

    def test_exhausted_promotion_does_not_apply(self):
        promotion = build(usage_limit=1)
        promotion.record_use()

        assert promotion.is_exhausted()
        assert not promotion.applies_to(500.0)

    def test_record_use_past_limit(self):
        promotion = build(usage_limit=1)
        promotion.record_use()

        with pytest.raises(ValidationError):
            promotion.record_use()


class TestDiscount:
    def test_percentage(self):
        assert build(value=15).discount_for(200.0, 50.0) == 30.0

    def test_fixed_amount(self):
        assert build(type=PromotionType.FIXED_AMOUNT, value=25).discount_for(200.0, 50.0) == 25.0

    def test_fixed_amount_never_exceeds_order(self):
        assert build(type=PromotionType.FIXED_AMOUNT, value=300).discount_for(120.0, 50.0) == 120.0

    def test_free_shipping_matches_shipping_cost(self):
        promotion = build(type=PromotionType.FREE_SHIPPING, value=1)

        assert promotion.discount_for(120.0, 50.0) == 50.0
        assert promotion.discount_for(600.0, 0.0) == 0.0
