"""Unit tests for selection validation."""
import pytest

from app.services.cart.models import NamedQuantity, SelectedAddon, SelectionBundle
from app.services.cart.validator import SelectionValidationError, SelectionValidator
from app.services.menu.base import Option
from app.services.menu.repository import find_item


@pytest.fixture
def catalog(test_menu_provider):
    return test_menu_provider._load_catalog().model_copy(deep=True)


@pytest.fixture
def validator(catalog):
    return SelectionValidator(catalog.options, catalog.addons)


def item(catalog, item_id):
    return find_item(catalog, item_id)[0]


def valid_set_selection(quantity: int = 1) -> SelectionBundle:
    return SelectionBundle(
        donenesses={"5分熟": quantity},
        drinks={"冰涼可樂": quantity},
        component_choices={"炸魚": quantity},
        sauces=[NamedQuantity(name="黑胡椒", quantity=2 * quantity)],
    )


class TestSelectionValidator:
    """Test quota and availability checks."""

    def test_valid_set_selection(self, catalog, validator):
        """Test that a complete set selection passes."""
        assert validator.validate(item(catalog, "set-1"), 1, valid_set_selection()) == []
        assert validator.validate(item(catalog, "set-1"), 2, valid_set_selection(2)) == []

    def test_quotas_scale_with_quantity(self, catalog, validator):
        """Test that one unit's choices are not enough for two units."""
        errors = validator.validate(item(catalog, "set-1"), 2, valid_set_selection(1))

        assert "Select exactly 2 doneness level(s)" in errors
        assert "Select exactly 4 sauce(s)" in errors
        assert "Select exactly 2 drink(s)" in errors
        assert "炸物選擇: select exactly 2" in errors

    def test_all_errors_reported_together(self, catalog, validator):
        """Test that an empty selection reports every missing group."""
        errors = validator.validate(item(catalog, "set-1"), 1, SelectionBundle())

        assert len(errors) == 4

    def test_unknown_doneness_rejected(self, catalog, validator):
        """Test that doneness keys must be known levels."""
        selection = valid_set_selection().model_copy(update={"donenesses": {"1分熟": 1}})

        errors = validator.validate(item(catalog, "set-1"), 1, selection)

        assert "Doneness '1分熟' is not offered" in errors

    def test_choices_for_missing_capability_rejected(self, catalog, validator):
        """Test that categories the item does not offer must stay empty."""
        selection = SelectionBundle(donenesses={"5分熟": 1}, drinks={"無糖紅茶": 1})

        errors = validator.validate(item(catalog, "burger-kimchi"), 1, selection)

        assert "'黃金泡菜脆皮雞塊吃到堡' has no doneness choice" in errors
        assert "'黃金泡菜脆皮雞塊吃到堡' has no drink choice" in errors

    def test_unavailable_item_rejected(self, catalog, validator):
        """Test that sold-out items cannot be confirmed."""
        errors = validator.validate(item(catalog, "sold-out"), 1, SelectionBundle())

        assert errors == ["'售完漢堡' is currently unavailable"]

    def test_quantity_must_be_positive(self, catalog, validator):
        """Test that quantity below one is rejected outright."""
        assert validator.validate(item(catalog, "burger-kimchi"), 0, SelectionBundle()) == [
            "Quantity must be at least 1"
        ]

    def test_unavailable_sauce_rejected(self, catalog):
        """Test that sold-out option entries cannot be chosen."""
        catalog.options.sauces = [Option(name="黑胡椒", is_available=False)]
        validator = SelectionValidator(catalog.options, catalog.addons)

        errors = validator.validate(item(catalog, "set-1"), 1, valid_set_selection())

        assert "Sauce '黑胡椒' is currently unavailable" in errors

    def test_desserts_need_one_from_each_group(self, catalog, validator):
        """Test that dessert choices are split across groups A and B."""
        dessert = item(catalog, "dessert-choice-single")
        both = SelectionBundle(
            desserts=[
                NamedQuantity(name="法式烤布蕾佐冰淇淋", quantity=1),
                NamedQuantity(name="格子鬆餅", quantity=1),
            ]
        )
        only_a = SelectionBundle(desserts=[NamedQuantity(name="法式烤布蕾佐冰淇淋", quantity=2)])

        assert validator.validate(dessert, 1, both) == []
        assert validator.validate(dessert, 1, only_a) == [
            "Select exactly 1 dessert(s) from each of groups A and B"
        ]

    def test_pasta_and_side_choices(self, catalog, validator):
        """Test pasta groups and the pick-two side choice."""
        pasta = item(catalog, "pasta-choice-single")
        selection = SelectionBundle(
            pastas=[
                NamedQuantity(name="炸雞/雞肉天使義麵", quantity=1),
                NamedQuantity(name="青醬索士", quantity=1),
            ],
            side_choices={"日湯": 1, "甜品": 1},
        )

        assert validator.validate(pasta, 1, selection) == []

        short = selection.model_copy(update={"side_choices": {"日湯": 1}})
        assert validator.validate(pasta, 1, short) == ["簡餐附餐 (請選二): select exactly 2"]

    def test_multi_choice_uses_cold_noodle_list(self, catalog):
        """Test that cold noodle flavours come from the server list."""
        catalog.options.cold_noodles = [
            Option(name="日式涼麵", is_available=True),
            Option(name="泰式涼麵", is_available=False),
        ]
        validator = SelectionValidator(catalog.options, catalog.addons)
        noodle = item(catalog, "cold-noodle-single")

        assert validator.validate(noodle, 1, SelectionBundle(multi_choice={"日式涼麵": 1})) == []
        assert "涼麵口味 '泰式涼麵' is not offered" in validator.validate(
            noodle, 1, SelectionBundle(multi_choice={"泰式涼麵": 1})
        )

    def test_single_choice_addon_must_be_offered(self, catalog, validator):
        """Test the single-choice upgrade against the item's options."""
        half = item(catalog, "half-1")

        assert validator.validate(
            half, 1, SelectionBundle(donenesses={"全熟": 1}, single_choice_addon="升級沙拉")
        ) == []
        assert "Unknown upgrade '升級甜點'" in validator.validate(
            half, 1, SelectionBundle(donenesses={"全熟": 1}, single_choice_addon="升級甜點")
        )

    def test_notes_require_capability(self, catalog, validator):
        """Test that notes are refused for items without a notes field."""
        errors = validator.validate(
            item(catalog, "dessert-choice-single"),
            1,
            SelectionBundle(
                desserts=[
                    NamedQuantity(name="法式烤布蕾佐冰淇淋", quantity=1),
                    NamedQuantity(name="格子鬆餅", quantity=1),
                ],
                notes="少糖",
            ),
        )

        assert errors == ["'任選甜品' does not take notes"]

    def test_unavailable_addon_rejected(self, catalog, validator):
        """Test that sold-out addons cannot be chosen."""
        congee = SelectedAddon(id="addon-congee", name="粥品 加購", price=60, quantity=1)

        errors = validator.validate(
            item(catalog, "burger-kimchi"), 1, SelectionBundle(addons=[congee])
        )

        assert errors == ["Addon '粥品 加購' is currently unavailable"]

    def test_ensure_valid_raises(self, catalog, validator):
        """Test that ensure_valid raises with the collected errors."""
        with pytest.raises(SelectionValidationError) as exc_info:
            validator.ensure_valid(item(catalog, "set-1"), 1, SelectionBundle())

        assert len(exc_info.value.errors) == 4

    def test_negative_counts_rejected(self, catalog, validator):
        """Test that a negative count cannot hide behind a satisfied quota."""
        selection = valid_set_selection().model_copy(
            update={
                "drinks": {"無糖紅茶": 1, "冰涼可樂": -3},
                "sauces": [
                    NamedQuantity(name="黑胡椒", quantity=2),
                    NamedQuantity(name="蘑菇醬", quantity=-1),
                ],
            }
        )

        errors = validator.validate(item(catalog, "set-1"), 1, selection)

        assert "Drink '冰涼可樂' quantity must not be negative" in errors
        assert "Sauce '蘑菇醬' quantity must not be negative" in errors
