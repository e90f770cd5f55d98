from storefront.database.products import ProductCatalog
from storefront.models.cart import DiscountKind

from helpers import make_discount, make_item, make_product, make_variant


class TestDiscountPolicy:
    def test_duplicate_code_rejected(self, service):
        assert service.apply_discount_safely(make_discount())
        assert not service.apply_discount_safely(make_discount(value=20))

        assert service.state.error == "Discount code already applied"
        assert len(service.state.discounts) == 1
        assert service.state.discounts[0].value == 10

    def test_non_positive_value_rejected(self, service):
        assert not service.apply_discount_safely(make_discount(value=0))
        assert service.state.error == "Discount value must be greater than 0"
        assert service.state.discounts == []

    def test_percentage_over_100_rejected(self, service):
        assert not service.apply_discount_safely(make_discount(value=150))
        assert service.state.error == "Percentage discount cannot exceed 100%"

    def test_large_fixed_amount_allowed(self, service):
        discount = make_discount(code="BIG", kind=DiscountKind.FIXED_AMOUNT, value=150)
        assert service.apply_discount_safely(discount)

    def test_success_clears_previous_error(self, service):
        service.apply_discount_safely(make_discount(value=0))
        assert service.apply_discount_safely(make_discount(value=5))
        assert service.state.error is None

    def test_rejection_is_not_persisted(self, service, persistence):
        service.apply_discount_safely(make_discount(value=-1))
        assert persistence.load().discounts == []

    def test_clear_all_discounts(self, service):
        service.apply_discount_safely(make_discount(code="A"))
        service.apply_discount_safely(make_discount(code="B"))
        service.clear_all_discounts()
        assert service.state.discounts == []


class TestSafeItemOperations:
    def test_add_zero_quantity_rejected(self, service):
        item = make_item().model_copy(update={"quantity": 0})
        assert not service.add_item_safely(item)
        assert service.state.error == "Quantity must be greater than 0"
        assert service.state.items == []

    def test_add_inactive_product_rejected(self, service):
        assert not service.add_item_safely(make_item(is_active=False))
        assert service.state.error == "Product is not available"
        assert service.state.items == []

    def test_add_out_of_stock_rejected(self, service):
        assert not service.add_item_safely(make_item(is_in_stock=False))
        assert service.state.error == "Product is out of stock"

    def test_variant_inventory_counts_as_stock(self, service):
        item = make_item(variant=make_variant(inventory=3), is_in_stock=False)
        assert service.add_item_safely(item)

    def test_update_quantity_negative_rejected(self, service):
        service.add_item_safely(make_item(quantity=2))
        assert not service.update_quantity_safely("p-1-default", -1)
        assert service.state.error == "Quantity cannot be negative"
        assert service.state.items[0].quantity == 2

    def test_update_quantity_unknown_item(self, service):
        assert not service.update_quantity_safely("missing", 1)
        assert service.state.error == "Item not found in cart"

    def test_update_quantity_zero_removes(self, service):
        service.add_item_safely(make_item(quantity=2))
        assert service.update_quantity_safely("p-1-default", 0)
        assert service.state.items == []

    def test_update_quantity_above_stock(self, service):
        service.add_item_safely(make_item(inventory_quantity=10))
        assert not service.update_quantity_safely("p-1-default", 11)
        assert service.state.error == "Only 10 items available in stock"

    def test_variant_inventory_limits_quantity(self, service):
        service.add_item_safely(make_item(variant=make_variant(inventory=5)))
        assert service.update_quantity_safely("p-1-v-1", 5)
        assert not service.update_quantity_safely("p-1-v-1", 6)

    def test_fallback_max_quantity(self, store):
        from storefront.services.cart_service import CartService

        service = CartService(store, max_item_quantity=50)
        service.add_item_safely(make_item(inventory_quantity=0))
        assert service.update_quantity_safely("p-1-default", 50)
        assert not service.update_quantity_safely("p-1-default", 51)

    def test_remove_unknown_item_reports_error(self, service):
        assert not service.remove_item_safely("missing")
        assert service.state.error == "Item not found in cart"

    def test_clear_empty_cart_reports_error(self, service):
        assert not service.clear_cart_safely()
        assert service.state.error == "Cart is already empty"

    def test_clear_cart(self, service):
        service.add_item_safely(make_item())
        assert service.clear_cart_safely()
        assert service.state.items == []

    def test_bulk_operations(self, service):
        results = service.add_multiple_items([
            make_item(quantity=1),
            make_item(quantity=1, id="p-2", is_active=False),
            make_item(quantity=2, id="p-3"),
        ])
        assert results == [True, False, True]

        results = service.update_multiple_quantities([("p-1-default", 3), ("missing", 1)])
        assert results == [True, False]
        assert service.state.summary.item_count == 5

    def test_increase_and_decrease(self, service):
        service.add_item_safely(make_item(quantity=1))
        assert service.increase_quantity("p-1-default")
        assert service.state.items[0].quantity == 2

        assert service.decrease_quantity("p-1-default")
        assert not service.decrease_quantity("p-1-default")
        assert service.state.items[0].quantity == 1


class TestValidation:
    def test_valid_cart(self, service):
        service.add_item_safely(make_item())
        result = service.validate_cart()
        assert result.is_valid
        assert result.errors == []

    def test_validate_against_catalog(self, service):
        catalog = ProductCatalog([make_product(), make_product(id="p-2", name="Gadget")])
        service.add_item_safely(make_item(quantity=1))
        service.add_item_safely(make_item(quantity=1, id="p-2", name="Gadget"))
        service.add_item_safely(make_item(quantity=1, id="p-3", name="Gizmo"))

        catalog.update_stock("p-2", 0)
        catalog.get_product("p-1").is_active = False

        result = service.validate_cart(catalog)

        assert not result.is_valid
        assert result.errors == [
            "Widget is no longer available",
            "Gadget is out of stock",
            "Gizmo is no longer available",
        ]

    def test_variant_inventory_shortfall(self, service):
        service.add_item_safely(make_item(quantity=4, variant=make_variant(inventory=5)))
        service.store.state.items[0].variant.inventory = 2

        result = service.validate_cart()

        assert result.errors == ["Only 2 Widget (Large) available"]


class TestProjections:
    def test_stats(self, service):
        service.add_item_safely(make_item(quantity=2))
        service.apply_discount_safely(make_discount())

        stats = service.stats()

        assert stats.total_items == 2
        assert stats.total_weight == 3.0
        assert not stats.is_empty
        assert stats.total == 38.88
        assert stats.applied_discounts == 1

    def test_groupings(self, service):
        service.add_item_safely(make_item(categories=["tools", "garden"], featured=True))
        service.add_item_safely(make_item(id="p-2", categories=["garden"]))

        groups = service.items_by_category()

        assert sorted(groups) == ["garden", "tools"]
        assert len(groups["garden"]) == 2
        assert [i.product_id for i in service.featured_items()] == ["p-1"]
        assert service.out_of_stock_items() == []

    def test_analytics(self, service):
        service.add_item_safely(make_item(quantity=2))
        service.add_item_safely(make_item(quantity=2, id="p-2", price=5.0, categories=["toys"]))
        service.apply_discount_safely(make_discount())

        analytics = service.get_analytics()

        assert analytics.total_value == 50.0
        assert analytics.average_item_price == 12.5
        assert analytics.most_expensive_item.product_id == "p-1"
        assert analytics.cheapest_item.product_id == "p-2"
        assert {c.category: c.value for c in analytics.category_distribution} == {
            "tools": 40.0,
            "toys": 10.0,
        }
        assert analytics.discount_usage.total_saved == 5.0
        assert analytics.discount_usage.discount_codes == ["SAVE10"]

    def test_analytics_empty_cart(self, service):
        analytics = service.get_analytics()
        assert analytics.average_item_price == 0
        assert analytics.most_expensive_item is None
