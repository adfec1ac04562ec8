"""
Translation config tests: registration, conditions, locale resolution
"""
import pytest

from localesync.core.exceptions import TranslationConfigError
from localesync.services.locale_resolver import all_locales_except_default, resolve_locales
from localesync.services.translation_config import (
    ALL_LOCALES,
    AbsentCondition,
    Condition,
    InlinePredicate,
    ModelEntity,
    NamedPredicate,
    TranslationRegistry,
    as_entity,
    registry,
    translates,
)

from tests.models import Category, Employer, Job, Page


class FakeEntity:
    """Non-ORM object implementing the capability interface"""
    
    translatable_type = "FakeEntity"
    translatable_id = "42"
    
    def __init__(self, **values):
        self.values = values
    
    def read_attribute(self, name):
        return self.values.get(name)
    
    def ready(self):
        return self.values.get("ready", False)


def test_translates_registers_config():
    local_registry = TranslationRegistry()
    
    config = translates(
        Category, "name", "short_name",
        into=["es", "fr"],
        translation_registry=local_registry,
    )
    
    assert local_registry.config_for(Category) is config
    assert local_registry.config_for("Category") is config
    assert local_registry.model_for("Category") is Category
    assert config.automatic_attributes == ("name", "short_name")
    assert config.manual_attributes == ()
    assert config.locales == ("es", "fr")
    assert not config.conditions_exist


def test_manual_accepts_single_name():
    config = registry.config_for(Employer)
    
    assert config.automatic_attributes == ("profile_html",)
    assert config.manual_attributes == ("name",)


def test_translates_requires_attributes():
    with pytest.raises(TranslationConfigError):
        translates(Category, into=["es"], translation_registry=TranslationRegistry())


def test_attribute_cannot_be_automatic_and_manual():
    with pytest.raises(TranslationConfigError):
        translates(Category, "name", manual="name", into=["es"], translation_registry=TranslationRegistry())


def test_unregistered_type_raises():
    with pytest.raises(TranslationConfigError):
        TranslationRegistry().config_for("Nope")


def test_condition_coercion():
    assert isinstance(Condition.coerce(None), AbsentCondition)
    assert isinstance(Condition.coerce("published"), NamedPredicate)
    assert isinstance(Condition.coerce(lambda entity: True), InlinePredicate)
    with pytest.raises(TranslationConfigError):
        Condition.coerce(42)


def test_named_predicate_calls_methods_and_reads_attributes():
    assert NamedPredicate("ready").evaluate(FakeEntity(ready=True))
    assert not NamedPredicate("ready").evaluate(FakeEntity(ready=False))
    assert NamedPredicate("translatable_id").evaluate(FakeEntity())


def test_absent_conditions_are_satisfied(db_session, hilton):
    assert registry.config_for(Employer).conditions_met(ModelEntity(hilton))


def test_when_and_unless(db_session, home_page, chef_job):
    page_config = registry.config_for(Page)
    job_config = registry.config_for(Job)
    
    assert not page_config.conditions_met(ModelEntity(home_page))
    home_page.published = True
    assert page_config.conditions_met(ModelEntity(home_page))
    
    assert not job_config.conditions_met(ModelEntity(chef_job))
    chef_job.posted_status = "posted"
    assert job_config.conditions_met(ModelEntity(chef_job))


def test_as_entity_wraps_models_only(db_session, hilton):
    fake = FakeEntity()
    
    assert as_entity(fake) is fake
    wrapped = as_entity(hilton)
    assert isinstance(wrapped, ModelEntity)
    assert as_entity(wrapped) is wrapped
    assert wrapped.translatable_type == "Employer"
    assert wrapped.translatable_id == str(hilton.id)
    assert wrapped.read_attribute("name") == "Hilton"
    assert wrapped.name == "Hilton"


def test_unsaved_model_has_no_translatable_id():
    with pytest.raises(TranslationConfigError):
        ModelEntity(Employer(name="Hyatt")).translatable_id


def test_identity_from_id_converts_key_type():
    assert ModelEntity.identity_from_id(Employer, "7") == 7


def test_method_locales(db_session, hilton):
    entity = ModelEntity(hilton)
    
    assert resolve_locales(entity, registry.config_for(Employer)) == hilton.method_that_returns_locales()


def test_callable_locales(db_session, admin_category):
    locales = resolve_locales(ModelEntity(admin_category), registry.config_for(Category))
    
    assert isinstance(locales, list)
    assert locales == ["es", "fr"]


def test_all_locales_sentinel(db_session, home_page):
    assert resolve_locales(ModelEntity(home_page), registry.config_for(Page)) == all_locales_except_default()


def test_all_locales_except_default_keeps_order():
    assert all_locales_except_default(["fr", "en", "de", "es"], "en") == ["fr", "de", "es"]
    assert all_locales_except_default(["en"], "en") == []


def test_fixed_locales_kept_verbatim():
    config = translates(Category, "name", into=["fr", "es", "fr"], translation_registry=TranslationRegistry())
    
    assert resolve_locales(FakeEntity(), config) == ["fr", "es", "fr"]


def test_resolver_returning_none_is_empty():
    config = translates(Category, "name", into=lambda entity: None, translation_registry=TranslationRegistry())
    
    assert resolve_locales(FakeEntity(), config) == []


def test_resolver_returning_non_list_is_rejected():
    config = translates(Category, "name", into=lambda entity: "es", translation_registry=TranslationRegistry())
    
    with pytest.raises(TranslationConfigError):
        resolve_locales(FakeEntity(), config)


def test_non_string_locales_are_normalized():
    config = translates(Category, "name", into=lambda entity: ("es", 1), translation_registry=TranslationRegistry())
    
    assert resolve_locales(FakeEntity(), config) == ["es", "1"]
    assert ALL_LOCALES == "all"
