import dataclasses

import pytest

from event_planner.core.errors import InvalidArgument


def test_add_item_recalculates_totals(store, make_offer, catering):
    store.add_item(make_offer("v1", 40000), make_offer("v1").category)
    package = store.add_item(make_offer("c1", 10000, category=catering), catering)

    assert [i.offer.id for i in package.items] == ["v1", "c1"]
    assert package.subtotal == 50000
    assert package.platform_fee == 5000
    assert package.tax_amount == 9000
    assert package.total_amount == 64000


def test_one_item_per_category_and_replacement_moves_to_end(store, make_offer, venue, catering):
    store.add_item(make_offer("v1", 40000), venue)
    store.add_item(make_offer("c1", 10000, category=catering), catering)

    package = store.add_item(make_offer("v2", 30000), venue)

    assert [i.offer.id for i in package.items] == ["c1", "v2"]
    assert package.item_for_category("venue-location").offer.id == "v2"
    assert package.subtotal == 40000


def test_item_ids_are_unique(store, make_offer, venue):
    first = store.add_item(make_offer("v1"), venue).items[0].id
    second = store.add_item(make_offer("v1"), venue).items[0].id
    assert first != second
    assert first.startswith("item_")


def test_remove_item_is_noop_when_missing(store, make_offer, venue):
    package = store.add_item(make_offer("v1", 40000), venue)
    item_id = package.items[0].id

    assert store.remove_item("nope").subtotal == 40000
    emptied = store.remove_item(item_id)
    assert emptied.items == []
    assert emptied.total_amount == 0


def test_add_then_remove_restores_previous_totals(store, make_offer, venue, catering):
    before = store.add_item(make_offer("v1", 40000), venue)
    added = store.add_item(make_offer("c1", 9999, category=catering), catering)

    after = store.remove_item(added.items[-1].id)

    assert after.subtotal == before.subtotal
    assert after.total_amount == before.total_amount


def test_add_item_requires_offer_and_category(store, venue, make_offer):
    with pytest.raises(InvalidArgument):
        store.add_item(None, venue)
    with pytest.raises(InvalidArgument):
        store.add_item(make_offer("v1"), None)
    assert store.package.items == []


def test_update_item_quantity_and_customizations(store, make_offer, venue):
    item_id = store.add_item(make_offer("v1", 2000), venue).items[0].id

    package = store.update_item(item_id, quantity=3, customizations={"theme": "gold"})
    package = store.update_item(item_id, customizations={"hours": 6})

    item = package.items[0]
    assert item.quantity == 3
    assert item.customizations == {"theme": "gold", "hours": 6}
    assert package.subtotal == 6000


@pytest.mark.parametrize("quantity", [0, -2, 2.5])
def test_update_item_rejects_bad_quantity(store, make_offer, venue, quantity):
    item_id = store.add_item(make_offer("v1", 2000), venue).items[0].id
    with pytest.raises(InvalidArgument):
        store.update_item(item_id, quantity=quantity)
    assert store.package.subtotal == 2000


def test_update_unknown_item_raises(store):
    with pytest.raises(InvalidArgument):
        store.update_item("missing", quantity=2)


def test_package_snapshot_is_not_mutated_by_later_changes(store, make_offer, venue, catering):
    snapshot = store.add_item(make_offer("v1", 40000), venue)
    store.add_item(make_offer("c1", 10000, category=catering), catering)

    assert len(snapshot.items) == 1
    assert snapshot.subtotal == 40000


def test_clear_empties_package(store, make_offer, venue):
    store.add_item(make_offer("v1"), venue)
    package = store.clear()
    assert package.items == []
    assert store.items() == []


def test_replacing_same_category_keeps_single_item(store, make_offer, venue):
    store.add_item(make_offer("a1", 40000), venue)
    package = store.add_item(make_offer("a2", 35000), venue)

    assert len(package.items) == 1
    assert package.items[0].offer.id == "a2"
    assert package.items[0].unit_price == 35000


def test_replace_leaves_other_category_item_untouched(store, make_offer, venue, catering):
    store.add_item(make_offer("a1", 40000), venue)
    b_item = store.add_item(make_offer("b1", 10000, category=catering), catering).items[-1]

    package = store.add_item(make_offer("a2", 30000), venue)

    kept = package.item_for_category("catering-food")
    assert (kept.id, kept.unit_price, kept.offer) == (b_item.id, b_item.unit_price, b_item.offer)
    assert [i.offer.id for i in package.items if i.category.id == "venue-location"] == ["a2"]


def test_removing_twice_changes_nothing_the_second_time(store, make_offer, venue, catering):
    store.add_item(make_offer("a1", 40000), venue)
    item_id = store.add_item(make_offer("b1", 10000, category=catering), catering).items[-1].id

    first = store.remove_item(item_id)
    second = store.remove_item(item_id)

    assert first == second


def test_at_most_one_item_per_category_after_every_add(store, make_offer, venue, catering):
    sequence = [("a1", venue), ("b1", catering), ("a2", venue), ("a3", venue), ("b2", catering)]
    for offer_id, category in sequence:
        package = store.add_item(make_offer(offer_id, 1000, category=category), category)
        ids = [i.category.id for i in package.items]
        assert len(ids) == len(set(ids))


def test_earlier_snapshot_survives_quantity_update(store, make_offer, venue):
    snapshot = store.add_item(make_offer("v1", 2000), venue)

    updated = store.update_item(snapshot.items[0].id, quantity=3, customizations={"hours": 4})

    assert snapshot.items[0].quantity == 1
    assert snapshot.items[0].customizations == {}
    assert snapshot.subtotal == sum(i.total_price for i in snapshot.items) == 2000
    assert updated.items[0].id == snapshot.items[0].id
    assert updated.subtotal == sum(i.total_price for i in updated.items) == 6000


def test_package_items_cannot_be_changed_in_place(store, make_offer, venue):
    item = store.add_item(make_offer("v1", 2000), venue).items[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.quantity = 5
