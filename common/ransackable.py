"""
Ransackable whitelists for entity models.

A model type opts in by subclassing ``RansackableModel`` and declaring, at
class level, which attributes, associations and scopes callers may use in
search queries. The three query classmethods never raise: unset
configuration reads as an empty set, and attributes always include the
baseline ``id``, ``updated_at`` and ``created_at``.
"""

import threading
from typing import Any, ClassVar, Collection, Dict, FrozenSet, Optional, Type, Union

from pydantic import BaseModel

from common.logging import get_logger

logger = get_logger("ransackable")

DEFAULT_RANSACKABLE_ATTRIBUTES: FrozenSet[str] = frozenset({"id", "updated_at", "created_at"})

_WHITELIST_FIELDS = (
    "whitelisted_ransackable_associations",
    "whitelisted_ransackable_attributes",
    "whitelisted_ransackable_scopes",
    "default_ransackable_attributes",
)


def _as_name_set(names: Optional[Union[str, Collection[str]]]) -> FrozenSet[str]:
    """Normalize a configured sequence of names into a frozenset."""
    if names is None:
        return frozenset()
    if isinstance(names, str):
        return frozenset([names])
    return frozenset(str(name) for name in names)


def _qualified_name(model: type) -> str:
    return f"{model.__module__}.{model.__qualname__}"


class RansackableRegistry:
    """
    Process-wide mapping from qualified model name to model type.

    Populated when each ``RansackableModel`` subclass is defined. A bare
    class name also resolves, as long as exactly one registered model has it.
    """

    def __init__(self):
        self._models: Dict[str, Type["RansackableModel"]] = {}
        self._lock = threading.Lock()

    def register(self, model: Type["RansackableModel"]) -> None:
        key = _qualified_name(model)
        with self._lock:
            previous = self._models.get(key)
            if previous is not None and previous is not model:
                logger.debug(f"Replacing ransackable model registration for {key}")
            self._models[key] = model

    def get(self, name: str) -> Optional[Type["RansackableModel"]]:
        with self._lock:
            model = self._models.get(name)
            if model is not None:
                return model
            matches = [m for m in self._models.values() if m.__name__ == name]
        return matches[0] if len(matches) == 1 else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def configure(
        self,
        model: Type["RansackableModel"],
        attributes: Optional[Collection[str]] = None,
        associations: Optional[Collection[str]] = None,
        scopes: Optional[Collection[str]] = None,
        defaults: Optional[Collection[str]] = None,
    ) -> None:
        """
        Replace whitelists of an already defined model.

        Each set is swapped wholesale for a new frozenset, so concurrent
        readers see either the old or the new value, never a partial one.
        Arguments left as None keep their current value.
        """
        updates = {
            "whitelisted_ransackable_attributes": attributes,
            "whitelisted_ransackable_associations": associations,
            "whitelisted_ransackable_scopes": scopes,
            "default_ransackable_attributes": defaults,
        }
        with self._lock:
            for field, value in updates.items():
                if value is not None:
                    setattr(model, field, _as_name_set(value))
        logger.info(
            f"Reconfigured ransackable whitelists for {model.__name__}",
            extra={"model": model.__name__, "fields": [f for f, v in updates.items() if v is not None]}
        )


ransackable_registry = RansackableRegistry()


class RansackableModel(BaseModel):
    """
    Base for entity models whose fields can be used in ransack-style searches.

    Subclasses assign plain sequences; they are normalized to frozensets once
    the class is built.
    """

    whitelisted_ransackable_associations: ClassVar[Collection[str]] = frozenset()
    whitelisted_ransackable_attributes: ClassVar[Collection[str]] = frozenset()
    whitelisted_ransackable_scopes: ClassVar[Collection[str]] = frozenset()
    default_ransackable_attributes: ClassVar[Collection[str]] = DEFAULT_RANSACKABLE_ATTRIBUTES

    # association name -> target model type, used to resolve `project_title_cont`
    ransackable_association_models: ClassVar[Dict[str, Type["RansackableModel"]]] = {}

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        for field in _WHITELIST_FIELDS:
            setattr(cls, field, _as_name_set(getattr(cls, field)))
        ransackable_registry.register(cls)

    @classmethod
    def ransackable_associations(cls) -> FrozenSet[str]:
        """Associations callers may filter through."""
        return cls.whitelisted_ransackable_associations

    @classmethod
    def ransackable_attributes(cls) -> FrozenSet[str]:
        """Baseline attributes plus the whitelisted ones."""
        return cls.default_ransackable_attributes | cls.whitelisted_ransackable_attributes

    @classmethod
    def ransackable_scopes(cls) -> FrozenSet[str]:
        """Named scopes callers may apply."""
        return cls.whitelisted_ransackable_scopes

    @classmethod
    def ransackable_association_model(cls, association: str) -> Optional[Type["RansackableModel"]]:
        return cls.ransackable_association_models.get(association)


ModelRef = Union[str, Type[RansackableModel]]


def resolve_model(model: ModelRef) -> Type[RansackableModel]:
    """Accept a model type, its qualified name or an unambiguous class name."""
    if isinstance(model, str):
        resolved = ransackable_registry.get(model)
        if resolved is None:
            raise KeyError(f"No unique ransackable model registered as '{model}'")
        return resolved
    if not (isinstance(model, type) and issubclass(model, RansackableModel)):
        raise TypeError(f"{model!r} does not adopt RansackableModel")
    return model


def ransackable_associations(model: ModelRef) -> FrozenSet[str]:
    return resolve_model(model).ransackable_associations()


def ransackable_attributes(model: ModelRef) -> FrozenSet[str]:
    return resolve_model(model).ransackable_attributes()


def ransackable_scopes(model: ModelRef) -> FrozenSet[str]:
    return resolve_model(model).ransackable_scopes()


def configure_ransackable(
    model: ModelRef,
    attributes: Optional[Collection[str]] = None,
    associations: Optional[Collection[str]] = None,
    scopes: Optional[Collection[str]] = None,
    defaults: Optional[Collection[str]] = None,
) -> None:
    ransackable_registry.configure(
        resolve_model(model),
        attributes=attributes,
        associations=associations,
        scopes=scopes,
        defaults=defaults,
    )
