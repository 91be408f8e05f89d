"""
Ransack-style search parameters.

Turns a ``q`` hash such as ``{"title_cont": "pilot", "s": "created_at desc"}``
into a ``SearchQuery`` for a ``RansackableModel``. Every attribute,
association, scope and sort named by the caller is checked against the
model's ransackable whitelists before it reaches a repository.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, Union

from common.exceptions import BusinessLogicException, UnpermittedSearchFieldException, ValidationException
from common.logging import get_logger, log_security_event
from common.ransackable import RansackableModel
from common.validation import is_blank, parse_bool

logger = get_logger("search")

SORT_KEYS = ("s", "sorts")
MAX_ASSOCIATION_DEPTH = 1
OR_SEPARATOR = "_or_"

# Predicates whose value may be a list; every other predicate takes one scalar.
LIST_PREDICATES = frozenset({"in", "not_in"})


def escape_like(value: Any) -> str:
    return str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str) and "," in value:
        return [part.strip() for part in value.split(",") if part.strip()]
    return [value]


def _null(value: Any) -> Tuple[str, Any]:
    return ("is", None) if parse_bool(value) else ("not_is", None)


def _not_null(value: Any) -> Tuple[str, Any]:
    return ("not_is", None) if parse_bool(value) else ("is", None)


# ransack predicate -> (repository operator, value)
PREDICATES: Dict[str, Callable[[Any], Tuple[str, Any]]] = {
    "eq": lambda v: ("eq", v),
    "not_eq": lambda v: ("neq", v),
    "lt": lambda v: ("lt", v),
    "lteq": lambda v: ("lte", v),
    "gt": lambda v: ("gt", v),
    "gteq": lambda v: ("gte", v),
    "cont": lambda v: ("ilike", f"%{escape_like(v)}%"),
    "i_cont": lambda v: ("ilike", f"%{escape_like(v)}%"),
    "start": lambda v: ("ilike", f"{escape_like(v)}%"),
    "end": lambda v: ("ilike", f"%{escape_like(v)}"),
    "in": lambda v: ("in", _as_list(v)),
    "not_in": lambda v: ("not_in", _as_list(v)),
    "null": _null,
    "not_null": _not_null,
}

# Longest suffix first so `status_not_eq` is not read as `status_not` + `eq`.
_PREDICATES_BY_LENGTH = sorted(PREDICATES, key=len, reverse=True)


@dataclass(frozen=True)
class SearchCondition:
    """A single `<attribute>_<predicate>` condition."""
    key: str
    attribute: str
    predicate: str
    operator: str
    value: Any
    associations: Tuple[str, ...] = ()

    @property
    def column(self) -> str:
        """Column path as PostgREST expects it (`project.title` for joined attributes)."""
        return ".".join(self.associations + (self.attribute,))


@dataclass(frozen=True)
class AnyCondition:
    """`<a>_or_<b>_<predicate>`: matches when any of the member conditions does."""
    key: str
    predicate: str
    conditions: Tuple[SearchCondition, ...]

    @property
    def columns(self) -> List[str]:
        return [condition.column for condition in self.conditions]


@dataclass(frozen=True)
class ScopeCondition:
    name: str
    value: Any
    filters: Dict[str, Any]


@dataclass(frozen=True)
class SortOrder:
    attribute: str
    descending: bool = False

    def as_order_by(self) -> str:
        return f"-{self.attribute}" if self.descending else self.attribute


@dataclass
class SearchQuery:
    """Validated search for one model type."""
    model: Type[RansackableModel]
    conditions: List[SearchCondition] = field(default_factory=list)
    any_of: List[AnyCondition] = field(default_factory=list)
    scopes: List[ScopeCondition] = field(default_factory=list)
    sorts: List[SortOrder] = field(default_factory=list)
    ignored_keys: List[str] = field(default_factory=list)

    @property
    def associations(self) -> List[str]:
        """Top-level associations that must be joined for the conditions."""
        return sorted({c.associations[0] for c in self.conditions if c.associations})

    def is_empty(self) -> bool:
        return not (self.conditions or self.any_of or self.scopes or self.sorts)

    def order_by(self) -> List[str]:
        return [sort.as_order_by() for sort in self.sorts]


class SearchParser:
    """
    Parses ransack-style search hashes for a single model type.

    With ``ignore_unknown_conditions`` set, keys that are not permitted are
    logged and dropped instead of rejected.
    """

    def __init__(self, model: Type[RansackableModel], ignore_unknown_conditions: bool = False):
        self.model = model
        self.ignore_unknown_conditions = ignore_unknown_conditions

    def parse(self, params: Optional[Mapping[str, Any]]) -> SearchQuery:
        query = SearchQuery(model=self.model)
        if not params:
            return query

        for key, value in params.items():
            if key in SORT_KEYS:
                query.sorts.extend(self._parse_sorts(value, query))
                continue

            if is_blank(value):
                continue

            if key in self.model.ransackable_scopes():
                scope = self._build_scope(key, value)
                if scope is not None:
                    query.scopes.append(scope)
                continue

            condition = self._parse_condition(key, value)
            if condition is None:
                self._reject(key, self.model.ransackable_attributes(), query)
            elif isinstance(condition, AnyCondition):
                query.any_of.append(condition)
            else:
                query.conditions.append(condition)

        logger.debug(
            f"Parsed search for {self.model.__name__}",
            extra={
                "model": self.model.__name__,
                "conditions": len(query.conditions) + len(query.any_of),
                "scopes": [s.name for s in query.scopes],
                "sorts": query.order_by(),
            }
        )
        return query

    def _parse_condition(self, key: str, value: Any) -> Optional[Union[SearchCondition, AnyCondition]]:
        for predicate in _PREDICATES_BY_LENGTH:
            suffix = f"_{predicate}"
            if not key.endswith(suffix) or len(key) == len(suffix):
                continue
            name = key[:-len(suffix)]
            resolved = self._resolve_attribute(self.model, name, ())
            if resolved is not None:
                return self._build_condition(key, predicate, resolved, value)
            if OR_SEPARATOR in name:
                members = self._resolve_any(name)
                if members is not None:
                    return AnyCondition(
                        key=key,
                        predicate=predicate,
                        conditions=tuple(self._build_condition(key, predicate, m, value) for m in members),
                    )
        return None

    def _build_condition(
        self,
        key: str,
        predicate: str,
        resolved: Tuple[str, Tuple[str, ...]],
        value: Any,
    ) -> SearchCondition:
        if predicate not in LIST_PREDICATES and isinstance(value, (list, tuple, set, dict)):
            raise ValidationException(
                detail=f"'{key}' takes a single value",
                field=key,
                value=value
            )
        attribute, associations = resolved
        operator, operand = PREDICATES[predicate](value)
        return SearchCondition(
            key=key,
            attribute=attribute,
            predicate=predicate,
            operator=operator,
            value=operand,
            associations=associations,
        )

    def _resolve_any(self, name: str) -> Optional[List[Tuple[str, Tuple[str, ...]]]]:
        """
        Split `title_or_description` into its attributes.

        Every part must be one of the model's own permitted attributes;
        association attributes cannot be combined with `_or_`.
        """
        permitted = self.model.ransackable_attributes()
        parts = name.split(OR_SEPARATOR)
        if not all(part in permitted for part in parts):
            return None
        return [(part, ()) for part in parts]

    def _resolve_attribute(
        self,
        model: Type[RansackableModel],
        name: str,
        associations: Tuple[str, ...],
    ) -> Optional[Tuple[str, Tuple[str, ...]]]:
        """Find `name` among the model's attributes or, failing that, through its associations."""
        if name in model.ransackable_attributes():
            return name, associations
        if len(associations) >= MAX_ASSOCIATION_DEPTH:
            return None
        for association in sorted(model.ransackable_associations(), key=len, reverse=True):
            prefix = f"{association}_"
            if not name.startswith(prefix):
                continue
            target = model.ransackable_association_model(association)
            if target is None:
                logger.warning(
                    f"Association '{association}' on {model.__name__} has no registered model"
                )
                continue
            resolved = self._resolve_attribute(target, name[len(prefix):], associations + (association,))
            if resolved is not None:
                return resolved
        return None

    def _build_scope(self, name: str, value: Any) -> Optional[ScopeCondition]:
        scope = getattr(self.model, f"scope_{name}", None)
        if scope is None:
            raise BusinessLogicException(
                detail=f"Scope '{name}' is whitelisted on {self.model.__name__} but not implemented",
                error_code="SCOPE_NOT_IMPLEMENTED",
                context={"model": self.model.__name__, "scope": name},
            )
        filters = scope(value)
        if filters is None:
            return None
        return ScopeCondition(name=name, value=value, filters=filters)

    def _parse_sorts(self, value: Any, query: SearchQuery) -> List[SortOrder]:
        sorts: List[SortOrder] = []
        for raw in _as_list(value):
            if is_blank(raw):
                continue
            parts = str(raw).split()
            attribute = parts[0]
            direction = parts[1].lower() if len(parts) > 1 else "asc"
            if direction not in ("asc", "desc") or len(parts) > 2:
                raise ValidationException(
                    detail=f"Invalid sort '{raw}', expected '<attribute> asc|desc'",
                    field="s",
                    value=raw
                )
            if attribute not in self.model.ransackable_attributes():
                self._reject(attribute, self.model.ransackable_attributes(), query)
                continue
            sorts.append(SortOrder(attribute=attribute, descending=direction == "desc"))
        return sorts

    def _reject(self, key: str, permitted, query: SearchQuery) -> None:
        if self.ignore_unknown_conditions:
            logger.warning(
                f"Ignoring unpermitted search key '{key}' for {self.model.__name__}",
                extra={"model": self.model.__name__, "key": key}
            )
            query.ignored_keys.append(key)
            return
        log_security_event(
            event_type="unpermitted_search_field",
            details={"model": self.model.__name__, "key": key},
        )
        raise UnpermittedSearchFieldException(
            model=self.model.__name__,
            key=key,
            permitted=permitted,
        )


def build_search_query(
    model: Type[RansackableModel],
    params: Optional[Mapping[str, Any]],
    ignore_unknown_conditions: bool = False,
) -> SearchQuery:
    """Parse `params` for `model`."""
    return SearchParser(model, ignore_unknown_conditions=ignore_unknown_conditions).parse(params)
