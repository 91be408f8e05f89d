import threading

import pytest

from common.ransackable import (
    DEFAULT_RANSACKABLE_ATTRIBUTES,
    RansackableModel,
    configure_ransackable,
    ransackable_associations,
    ransackable_attributes,
    ransackable_registry,
    ransackable_scopes,
    resolve_model,
)
from entities.project import Project
from entities.script import Script

BASELINE = {"id", "updated_at", "created_at"}


class Order(RansackableModel):
    whitelisted_ransackable_attributes = ["total", "status"]


class Tag(RansackableModel):
    pass


class OrderWithId(RansackableModel):
    whitelisted_ransackable_attributes = ["id"]


class ReversedOrder(RansackableModel):
    whitelisted_ransackable_attributes = ["status", "total", "status"]


class Gadget(RansackableModel):
    whitelisted_ransackable_attributes = ["name"]


class Holder(RansackableModel):
    whitelisted_ransackable_associations = ["gadget"]
    ransackable_association_models = {"gadget": Gadget}


def define_other_gadget():
    class Gadget(RansackableModel):
        whitelisted_ransackable_attributes = ["serial"]

    return Gadget


class TestPermittedSets:
    def test_unconfigured_type_gets_baseline_only(self):
        assert ransackable_attributes(Tag) == BASELINE
        assert ransackable_associations(Tag) == set()
        assert ransackable_scopes(Tag) == set()

    def test_configured_attributes_are_added_to_baseline(self):
        assert ransackable_attributes(Order) == BASELINE | {"total", "status"}

    def test_overlap_with_baseline_is_collapsed(self):
        assert ransackable_attributes(OrderWithId) == BASELINE
        assert len(ransackable_attributes(OrderWithId)) == 3

    def test_configuration_order_and_duplicates_do_not_matter(self):
        assert ransackable_attributes(ReversedOrder) == ransackable_attributes(Order)

    def test_repeated_calls_return_equal_sets(self):
        first = Script.ransackable_attributes()
        assert Script.ransackable_attributes() == first
        assert Script.ransackable_associations() == Script.ransackable_associations()
        assert Script.ransackable_scopes() == Script.ransackable_scopes()

    @pytest.mark.parametrize("model", [Order, Tag, Project, Script])
    def test_baseline_always_included(self, model):
        permitted = model.ransackable_attributes()
        assert DEFAULT_RANSACKABLE_ATTRIBUTES <= permitted
        assert set(model.whitelisted_ransackable_attributes) <= permitted

    def test_configuration_is_stored_as_frozensets(self):
        assert isinstance(Order.whitelisted_ransackable_attributes, frozenset)
        assert isinstance(Tag.whitelisted_ransackable_scopes, frozenset)

    def test_single_string_is_one_name(self):
        class Label(RansackableModel):
            whitelisted_ransackable_scopes = "visible"

        assert Label.ransackable_scopes() == {"visible"}

    def test_instances_share_class_configuration(self):
        class Note(RansackableModel):
            whitelisted_ransackable_attributes = ("body",)
            body: str = ""

        assert Note(body="a").ransackable_attributes() == Note.ransackable_attributes()

    def test_entity_whitelists(self):
        assert Script.ransackable_associations() == {"project"}
        assert "by_project" in Script.ransackable_scopes()
        assert "title" in Project.ransackable_attributes()
        assert "budget" not in Project.ransackable_attributes()
        assert Project.ransackable_scopes() == {"active", "completed", "draft"}
        assert Script.ransackable_scopes() == {"active", "draft", "archived", "by_project", "by_type"}


class TestRegistry:
    def test_subclasses_register_by_name(self):
        assert "Order" in ransackable_registry
        assert ransackable_registry.get("Project") is Project

    def test_resolve_by_name(self):
        assert ransackable_attributes("Order") == BASELINE | {"total", "status"}

    def test_unknown_name_raises_key_error(self):
        with pytest.raises(KeyError):
            resolve_model("Nope")

    def test_type_without_capability_raises_type_error(self):
        with pytest.raises(TypeError):
            resolve_model(dict)

    def test_association_model_lookup(self):
        assert Script.ransackable_association_model("project") is Project
        assert Script.ransackable_association_model("missing") is None

    def test_same_class_name_elsewhere_does_not_retarget_associations(self):
        other = define_other_gadget()

        assert other is not Gadget
        assert Holder.ransackable_association_model("gadget") is Gadget
        assert resolve_model(f"{Gadget.__module__}.Gadget") is Gadget
        assert resolve_model(f"{other.__module__}.{other.__qualname__}") is other

    def test_ambiguous_class_name_raises_key_error(self):
        define_other_gadget()

        with pytest.raises(KeyError):
            resolve_model("Gadget")


class TestConfigure:
    def test_replaces_only_given_sets(self):
        class Invoice(RansackableModel):
            whitelisted_ransackable_attributes = ("number",)
            whitelisted_ransackable_scopes = ("paid",)

        configure_ransackable(Invoice, attributes=["number", "due_on"])

        assert Invoice.ransackable_attributes() == BASELINE | {"number", "due_on"}
        assert Invoice.ransackable_scopes() == {"paid"}

    def test_baseline_can_be_overridden(self):
        class AuditEntry(RansackableModel):
            whitelisted_ransackable_attributes = ("action",)

        configure_ransackable("AuditEntry", defaults=["id"])

        assert AuditEntry.ransackable_attributes() == {"id", "action"}
        assert Tag.ransackable_attributes() == BASELINE

    def test_concurrent_readers_never_see_partial_sets(self):
        class Ticket(RansackableModel):
            whitelisted_ransackable_attributes = ("a", "b")

        old = BASELINE | {"a", "b"}
        new = BASELINE | {"c", "d", "e"}
        seen = []
        stop = threading.Event()

        def read():
            while not stop.is_set():
                seen.append(Ticket.ransackable_attributes())

        readers = [threading.Thread(target=read) for _ in range(4)]
        for reader in readers:
            reader.start()
        for i in range(200):
            configure_ransackable(Ticket, attributes=["c", "d", "e"] if i % 2 == 0 else ["a", "b"])
        stop.set()
        for reader in readers:
            reader.join()

        assert seen
        assert all(result in (old, new) for result in seen)
