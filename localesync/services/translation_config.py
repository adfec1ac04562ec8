"""
Translation config - which attributes of a model are translated, into which
locales, and under which conditions.

Models are registered with `translates()`:

    translates(Page, "title", "heading", "content", manual="subhead", into=ALL_LOCALES, when="published")
    translates(Job, "title", into=["es", "fr"], unless=lambda job: job.posted_status != "posted")
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable
import logging

from sqlalchemy import inspect as sa_inspect

from localesync.core.exceptions import TranslationConfigError

logger = logging.getLogger(__name__)

# Locale sentinel: every configured locale except the default one
ALL_LOCALES = "all"

# Joins composite primary keys into one translatable_id
ID_SEPARATOR = ","


@runtime_checkable
class TranslatableEntity(Protocol):
    """Capability interface the lifecycle depends on"""
    
    @property
    def translatable_type(self) -> str: ...
    
    @property
    def translatable_id(self) -> str: ...
    
    def read_attribute(self, name: str) -> Any: ...


class ModelEntity:
    """
    Adapts a SQLAlchemy model instance to TranslatableEntity.
    Other attribute lookups go to the instance, so named predicates and
    locale methods resolve on the model itself.
    """
    
    def __init__(self, instance):
        self.instance = instance
    
    @property
    def translatable_type(self) -> str:
        return type(self.instance).__name__
    
    @property
    def translatable_id(self) -> str:
        identity = sa_inspect(self.instance).identity
        if not identity:
            raise TranslationConfigError(f"{self.translatable_type} must be persisted before it can be translated")
        return ID_SEPARATOR.join(str(part) for part in identity)
    
    @staticmethod
    def identity_from_id(model: type, translatable_id: str):
        """Primary key value(s) for Session.get from a translatable_id string"""
        columns = sa_inspect(model).primary_key
        parts = translatable_id.split(ID_SEPARATOR) if len(columns) > 1 else [translatable_id]
        values = []
        for column, part in zip(columns, parts):
            try:
                python_type = column.type.python_type
            except NotImplementedError:
                python_type = str
            values.append(part if python_type is str else python_type(part))
        return tuple(values) if len(values) > 1 else values[0]
    
    def read_attribute(self, name: str) -> Any:
        return getattr(self.instance, name)
    
    def __getattr__(self, name):
        # Only reached for names not defined on the adapter
        if name == "instance":
            raise AttributeError(name)
        return getattr(self.instance, name)
    
    def __repr__(self):
        return f"<ModelEntity({self.instance!r})>"


def as_entity(obj) -> TranslatableEntity:
    """Wrap model instances; pass through objects already implementing the interface"""
    if isinstance(obj, ModelEntity):
        return obj
    if isinstance(obj, TranslatableEntity):
        return obj
    return ModelEntity(obj)


class Condition:
    """
    Gate condition: absent, a named predicate, or an inline predicate.
    """
    
    exists = True
    
    @staticmethod
    def coerce(value: Union[None, str, Callable[[Any], Any], "Condition"]) -> "Condition":
        if isinstance(value, Condition):
            return value
        if value is None:
            return AbsentCondition()
        if isinstance(value, str):
            return NamedPredicate(value)
        if callable(value):
            return InlinePredicate(value)
        raise TranslationConfigError(f"Condition must be a name or a callable, got {value!r}")
    
    def evaluate(self, entity) -> bool:
        raise NotImplementedError


class AbsentCondition(Condition):
    exists = False
    
    def evaluate(self, entity) -> bool:
        return True
    
    def __repr__(self):
        return "AbsentCondition()"


class NamedPredicate(Condition):
    """Method or attribute on the entity; methods are called"""
    
    def __init__(self, name: str):
        self.name = name
    
    def evaluate(self, entity) -> bool:
        value = getattr(entity, self.name)
        if callable(value):
            value = value()
        return bool(value)
    
    def __repr__(self):
        return f"NamedPredicate({self.name!r})"


class InlinePredicate(Condition):
    """Callable receiving the entity"""
    
    def __init__(self, func: Callable[[Any], Any]):
        self.func = func
    
    def evaluate(self, entity) -> bool:
        return bool(self.func(entity))
    
    def __repr__(self):
        return f"InlinePredicate({getattr(self.func, '__name__', self.func)!r})"


@dataclass(frozen=True)
class TranslationConfig:
    """Static per-type translation description"""
    translatable_type: str
    automatic_attributes: Tuple[str, ...]
    manual_attributes: Tuple[str, ...] = ()
    locales: Any = ALL_LOCALES
    when: Condition = field(default_factory=AbsentCondition)
    unless: Condition = field(default_factory=AbsentCondition)
    condition_attributes: Optional[Tuple[str, ...]] = None
    
    @property
    def conditions_exist(self) -> bool:
        return self.when.exists or self.unless.exists
    
    def conditions_met(self, entity) -> bool:
        """True if the gate is open; absent conditions count as satisfied"""
        if self.when.exists and not self.when.evaluate(entity):
            return False
        if self.unless.exists and self.unless.evaluate(entity):
            return False
        return True
    
    def all_attributes(self) -> Tuple[str, ...]:
        return self.automatic_attributes + self.manual_attributes


class TranslationRegistry:
    """Registered translation configs, keyed by entity type name"""
    
    def __init__(self):
        self._configs: Dict[str, TranslationConfig] = {}
        self._models: Dict[str, type] = {}
    
    def register(self, model: type, config: TranslationConfig) -> TranslationConfig:
        name = config.translatable_type
        if name in self._configs:
            logger.warning(f"Replacing translation config for {name}")
        self._configs[name] = config
        self._models[name] = model
        logger.debug(f"Registered {name}: automatic={config.automatic_attributes} manual={config.manual_attributes}")
        return config
    
    def unregister(self, model_or_name) -> None:
        name = model_or_name if isinstance(model_or_name, str) else model_or_name.__name__
        self._configs.pop(name, None)
        self._models.pop(name, None)
    
    def config_for(self, entity_or_type) -> TranslationConfig:
        """
        Get config for an entity, a model class or a type name.
        
        Raises:
            TranslationConfigError: type is not registered
        """
        if isinstance(entity_or_type, str):
            name = entity_or_type
        elif isinstance(entity_or_type, type):
            name = entity_or_type.__name__
        else:
            name = as_entity(entity_or_type).translatable_type
        
        config = self._configs.get(name)
        if config is None:
            raise TranslationConfigError(f"{name} is not translatable")
        return config
    
    def model_for(self, translatable_type: str) -> type:
        model = self._models.get(translatable_type)
        if model is None:
            raise TranslationConfigError(f"{translatable_type} is not translatable")
        return model
    
    def is_translatable(self, obj) -> bool:
        name = obj if isinstance(obj, str) else (obj.__name__ if isinstance(obj, type) else type(obj).__name__)
        return name in self._configs
    
    def types(self) -> Tuple[str, ...]:
        return tuple(self._configs)


# Global registry instance
registry = TranslationRegistry()


def _names(value: Union[None, str, Iterable[str]]) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def translates(
    model: type,
    *attributes: str,
    manual: Union[None, str, Iterable[str]] = None,
    into: Any = ALL_LOCALES,
    when: Any = None,
    unless: Any = None,
    condition_attributes: Union[None, str, Iterable[str]] = None,
    translation_registry: Optional[TranslationRegistry] = None,
) -> TranslationConfig:
    """
    Register a model as translatable.
    
    Args:
        model: SQLAlchemy model class
        *attributes: Automatically translated attribute names, in checksum order
        manual: Manually translated attribute name(s)
        into: Locale list, method name, callable(entity) or ALL_LOCALES
        when: Gate condition - translation allowed only while true
        unless: Anti-gate condition - translation blocked while true
        condition_attributes: Attributes the conditions read (limits gate re-evaluation)
        translation_registry: Registry to use (defaults to the global one)
    
    Returns:
        Registered TranslationConfig
    """
    automatic = _names(attributes)
    manual_attrs = _names(manual)
    
    if not automatic and not manual_attrs:
        raise TranslationConfigError(f"{model.__name__}: translates() needs at least one attribute")
    
    overlap = set(automatic) & set(manual_attrs)
    if overlap:
        raise TranslationConfigError(f"{model.__name__}: attributes both automatic and manual: {sorted(overlap)}")
    
    if into is None:
        raise TranslationConfigError(f"{model.__name__}: translates() needs `into`")
    if isinstance(into, (list, tuple)):
        into = tuple(str(locale) for locale in into)
    
    config = TranslationConfig(
        translatable_type=model.__name__,
        automatic_attributes=automatic,
        manual_attributes=manual_attrs,
        locales=into,
        when=Condition.coerce(when),
        unless=Condition.coerce(unless),
        condition_attributes=_names(condition_attributes) if condition_attributes is not None else None,
    )
    return (translation_registry or registry).register(model, config)
