"""
Staleness tests: outdated, missing and fully-translated predicates
"""
import pytest

from localesync.core.exceptions import InvalidScopeError
from localesync.services.staleness import TranslationScope, is_blank


@pytest.mark.parametrize("value,expected", [
    ("automatic", TranslationScope.AUTOMATIC),
    ("auto", TranslationScope.AUTOMATIC),
    ("AUTOMATIC_ONLY", TranslationScope.AUTOMATIC),
    ("manual", TranslationScope.MANUAL),
    ("manual_only", TranslationScope.MANUAL),
    ("all", TranslationScope.ALL),
    ("both", TranslationScope.ALL),
    (TranslationScope.MANUAL, TranslationScope.MANUAL),
])
def test_scope_synonyms(value, expected):
    assert TranslationScope.parse(value) is expected


@pytest.mark.parametrize("value", ["automatically", "", None, 3])
def test_unknown_scope_is_invalid_argument(value):
    with pytest.raises(InvalidScopeError):
        TranslationScope.parse(value)


def test_predicates_reject_unknown_scope(service, hilton):
    with pytest.raises(ValueError):
        service.translations_missing(hilton, "sometimes")
    with pytest.raises(InvalidScopeError):
        service.fully_translated(hilton, "sometimes")


def test_missing_until_translated(service, hilton):
    assert service.translations_missing(hilton)
    assert not service.fully_translated(hilton)
    
    service.translate_now(hilton)
    
    assert not service.translations_missing(hilton)
    assert service.fully_translated(hilton)


def test_record_without_attribute_entry_is_missing(service, hilton):
    service.set_manual_attribute(hilton, "name", "es", "[es] Hilton")
    service.set_manual_attribute(hilton, "name", "fr", "[fr] Hilton")
    
    # Records exist for every locale, but profile_html is not translated
    assert service.translations_missing(hilton, "automatic")
    assert not service.translations_missing(hilton, "manual")


def test_manual_scope_requires_every_manual_attribute(service, hilton):
    service.translate_now(hilton)
    
    assert service.fully_translated(hilton, "automatic")
    assert service.translations_missing(hilton, "manual")
    assert service.translations_missing(hilton, "all")
    
    service.set_manual_attribute(hilton, "name", "es", "[es] Hilton")
    assert service.translations_missing(hilton, "manual")
    
    service.set_manual_attribute(hilton, "name", "fr", "[fr] Hilton")
    assert service.fully_translated(hilton, "manual")
    assert service.fully_translated(hilton, "all")


def test_blank_source_values_are_exempt(service, hilton):
    service.entities.update(hilton, profile_html="")
    service.queue.clear()
    
    assert not service.translations_missing(hilton, "automatic")
    assert service.fully_translated(hilton, "automatic")


def test_closed_gate_policies_differ(service, home_page):
    """Nothing is required while the gate is closed"""
    assert not home_page.published
    
    assert service.translations_missing(home_page, "all") is False
    assert service.fully_translated(home_page, "all") is True


def test_open_gate_requires_translations(service, home_page):
    service.entities.update(home_page, published=True)
    
    assert service.translations_missing(home_page)
    assert not service.fully_translated(home_page)


def test_outdated_after_source_change(service, admin_category):
    service.translate_now(admin_category)
    assert not service.translations_outdated(admin_category)
    
    admin_category.short_name = "administration"
    service.db.commit()
    
    assert service.translations_outdated(admin_category)
    assert service.staleness.outdated_locales(admin_category) == ["es", "fr"]


def test_missing_translations_lists_locale_attribute_pairs(service, admin_category):
    service.translate_now(admin_category, "es")
    
    assert service.staleness.missing_translations(admin_category) == [
        ("fr", "name"),
        ("fr", "short_name"),
    ]


def test_status_summary(service, hilton):
    service.translate_now(hilton, "es")
    
    status = service.status(hilton)
    
    assert status["translatable_type"] == "Employer"
    assert status["translatable_id"] == str(hilton.id)
    assert status["locales"] == ["es", "fr"]
    assert status["outdated_locales"] == []
    assert {"locale": "fr", "attribute": "profile_html"} in status["missing"]
    assert status["fully_translated"] is False


@pytest.mark.parametrize("value,expected", [
    (None, True), ("", True), ("  \n", True), ("x", False), (0, False), (False, False),
])
def test_is_blank(value, expected):
    assert is_blank(value) is expected
