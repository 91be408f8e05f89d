import pytest

from common.exceptions import (
    BusinessLogicException,
    UnpermittedSearchFieldException,
    ValidationException,
)
from common.ransackable import RansackableModel
from common.search import build_search_query, escape_like
from entities.project import Project
from entities.project_type import ProjectType
from entities.scene import Scene
from entities.script import Script


class TestConditions:
    def test_predicate_maps_to_operator(self):
        query = build_search_query(Project, {"title_cont": "pilot", "company_id_eq": "7"})

        by_key = {c.key: c for c in query.conditions}
        assert by_key["title_cont"].operator == "ilike"
        assert by_key["title_cont"].value == "%pilot%"
        assert by_key["company_id_eq"].operator == "eq"
        assert by_key["company_id_eq"].value == "7"

    def test_longest_predicate_suffix_wins(self):
        query = build_search_query(Project, {"status_not_eq": "archived", "status_not_in": "draft,locked"})

        by_key = {c.key: c for c in query.conditions}
        assert by_key["status_not_eq"].attribute == "status"
        assert by_key["status_not_eq"].operator == "neq"
        assert by_key["status_not_in"].operator == "not_in"
        assert by_key["status_not_in"].value == ["draft", "locked"]

    def test_baseline_attributes_are_searchable(self):
        query = build_search_query(Scene, {"created_at_gteq": "2025-01-01", "id_in": ["1", "2"]})

        assert {c.attribute for c in query.conditions} == {"created_at", "id"}

    def test_null_predicates(self):
        query = build_search_query(Project, {"company_id_null": "true", "created_by_user_id_not_null": "1"})

        by_key = {c.key: c for c in query.conditions}
        assert by_key["company_id_null"].operator == "is"
        assert by_key["created_by_user_id_not_null"].operator == "not_is"

    def test_like_wildcards_are_escaped(self):
        assert escape_like("50%_off") == "50\\%\\_off"
        query = build_search_query(Project, {"title_start": "100%"})
        assert query.conditions[0].value == "100\\%%"

    def test_blank_values_are_skipped(self):
        query = build_search_query(Project, {"title_cont": "  ", "status_in": [], "id_eq": None})

        assert query.is_empty()

    def test_association_attribute(self):
        query = build_search_query(Script, {"project_title_cont": "night"})

        condition = query.conditions[0]
        assert condition.associations == ("project",)
        assert condition.column == "project.title"
        assert query.associations == ["project"]

    def test_association_attribute_must_be_permitted_on_target(self):
        with pytest.raises(UnpermittedSearchFieldException):
            build_search_query(Script, {"project_budget_gt": "10"})

    def test_conditions_on_same_column_are_all_kept(self):
        query = build_search_query(Project, {"title_cont": "night", "title_start": "The"})

        assert [(c.column, c.operator, c.value) for c in query.conditions] == [
            ("title", "ilike", "%night%"),
            ("title", "ilike", "The%"),
        ]

    @pytest.mark.parametrize("predicate", ["cont", "i_cont", "start", "end", "eq"])
    def test_scalar_predicates_reject_lists(self, predicate):
        with pytest.raises(ValidationException) as exc_info:
            build_search_query(Project, {f"title_{predicate}": ["a", "b"]})

        assert exc_info.value.status_code == 422
        assert exc_info.value.context["field"] == f"title_{predicate}"


class TestOrConditions:
    def test_attributes_combined_with_or(self):
        query = build_search_query(Script, {"title_or_description_cont": "pilot"})

        assert query.conditions == []
        group = query.any_of[0]
        assert group.key == "title_or_description_cont"
        assert group.columns == ["title", "description"]
        assert {(c.operator, c.value) for c in group.conditions} == {("ilike", "%pilot%")}
        assert not query.is_empty()

    def test_every_part_must_be_permitted(self):
        with pytest.raises(UnpermittedSearchFieldException) as exc_info:
            build_search_query(Project, {"title_or_budget_eq": "1"})

        assert exc_info.value.context["key"] == "title_or_budget_eq"

    def test_association_parts_are_not_combined(self):
        with pytest.raises(UnpermittedSearchFieldException):
            build_search_query(Script, {"title_or_project_title_cont": "night"})

    def test_empty_part_is_rejected(self):
        with pytest.raises(UnpermittedSearchFieldException):
            build_search_query(Script, {"title_or__or_description_cont": "x"})

    def test_or_group_rejects_lists(self):
        with pytest.raises(ValidationException):
            build_search_query(Script, {"title_or_description_cont": ["a", "b"]})


class TestRejection:
    def test_unpermitted_attribute_is_rejected(self):
        with pytest.raises(UnpermittedSearchFieldException) as exc_info:
            build_search_query(Project, {"budget_gt": "1000"})

        assert exc_info.value.status_code == 422
        assert exc_info.value.error_code == "UNPERMITTED_SEARCH_FIELD"
        assert "title" in exc_info.value.context["permitted"]

    def test_unknown_predicate_is_rejected(self):
        with pytest.raises(UnpermittedSearchFieldException):
            build_search_query(Project, {"title_matches": "x"})

    def test_unpermitted_keys_can_be_ignored(self):
        query = build_search_query(
            Project,
            {"budget_gt": "1000", "title_eq": "A", "s": "budget desc"},
            ignore_unknown_conditions=True,
        )

        assert [c.key for c in query.conditions] == ["title_eq"]
        assert query.ignored_keys == ["budget_gt", "budget"]
        assert query.sorts == []


class TestScopes:
    def test_scope_filters(self):
        query = build_search_query(Script, {"by_project": "3", "active": "true"})

        filters = {s.name: s.filters for s in query.scopes}
        assert filters == {"by_project": {"project_id": "3"}, "active": {"status": "active"}}

    def test_false_boolean_scope_is_skipped(self):
        query = build_search_query(Project, {"active": "false"})

        assert query.scopes == []

    def test_invalid_boolean_scope_value(self):
        with pytest.raises(ValidationException):
            build_search_query(Project, {"active": "maybe"})

    def test_search_scope_escapes_term(self):
        query = build_search_query(ProjectType, {"search": "doc_"})

        assert query.scopes[0].filters == {"name": {"ilike": "%doc\\_%"}}

    def test_whitelisted_scope_without_method(self):
        class Shipment(RansackableModel):
            whitelisted_ransackable_scopes = ("late",)

        with pytest.raises(BusinessLogicException) as exc_info:
            build_search_query(Shipment, {"late": "1"})

        assert exc_info.value.error_code == "SCOPE_NOT_IMPLEMENTED"


class TestSorts:
    def test_sort_string(self):
        query = build_search_query(Project, {"s": "created_at desc"})

        assert query.order_by() == ["-created_at"]

    def test_multiple_sorts_default_ascending(self):
        query = build_search_query(Scene, {"s": ["order", "scene_number desc"]})

        assert query.order_by() == ["order", "-scene_number"]

    def test_sort_on_unpermitted_attribute(self):
        with pytest.raises(UnpermittedSearchFieldException):
            build_search_query(Project, {"s": "budget asc"})

    def test_invalid_direction(self):
        with pytest.raises(ValidationException):
            build_search_query(Project, {"s": "title sideways"})
