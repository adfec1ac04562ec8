"""
Lifecycle tests: when saves trigger, skip or purge translations
"""
import pytest

from localesync.services.checksum import checksum_of
from localesync.services.translation_config import translates

from tests.models import Category, Employer, Job, Page


def test_updating_translated_attribute_creates_translations(service, admin_category):
    """Changing an automatic attribute translates into every target locale"""
    assert service.translations(admin_category) == []
    
    service.entities.update(admin_category, name="administrative")
    service.queue.perform_pending()
    
    assert len(service.translations(admin_category)) == 2
    assert service.read_attribute(admin_category, "name", "es") == "[es] administrative"
    assert service.read_attribute(admin_category, "name", "fr") == "[fr] administrative"
    assert service.translation_for(admin_category, "es") is not None
    assert service.translation_for(admin_category, "fr") is not None


def test_create_scenario_two_locales_with_blank_short_name(service):
    """Create with name only: one record per locale, checksum of ('Acme', '')"""
    category = Category(name="Acme")
    tasks = service.entities.save(category)
    assert sorted(t.locale for t in tasks) == ["es", "fr"]
    
    service.queue.perform_pending()
    
    translations = service.translations(category)
    assert sorted(t.locale for t in translations) == ["es", "fr"]
    for translation in translations:
        assert translation.translated_attributes["name"] == f"[{translation.locale}] Acme"
        assert translation.source_checksum == checksum_of(["Acme", ""])


def test_non_translated_attribute_change_does_not_outdate(service, admin_category):
    service.translate_now(admin_category)
    assert not service.translations_outdated(admin_category)
    
    tasks = service.entities.update(admin_category, path="/asdf")
    
    assert tasks == []
    assert not service.translations_outdated(admin_category)


def test_when_condition_toggles_translations(service, home_page):
    """Gate closed -> nothing; opened -> translated; closed again -> purged"""
    service.entities.update(home_page, title="new title")
    service.queue.perform_pending()
    assert service.translations(home_page) == []
    
    service.entities.update(home_page, published=True)
    service.queue.perform_pending()
    assert len(service.translations(home_page)) == 2
    
    service.entities.update(home_page, published=False)
    service.queue.perform_pending()
    assert service.translations(home_page) == []


def test_unless_condition_toggles_translations(service, chef_job):
    service.entities.update(chef_job, title="new title")
    service.queue.perform_pending()
    assert service.translations(chef_job) == []
    
    service.entities.update(chef_job, posted_status="posted")
    service.queue.perform_pending()
    assert len(service.translations(chef_job)) == 2
    
    service.entities.update(chef_job, posted_status="expired")
    service.queue.perform_pending()
    assert service.translations(chef_job) == []


def test_gate_close_destroys_manual_content(service, home_page):
    service.entities.update(home_page, published=True)
    service.queue.perform_pending()
    service.set_manual_attribute(home_page, "subhead", "fr", "[fr] Bonjour")
    
    service.entities.update(home_page, published=False)
    
    assert service.translations(home_page) == []
    assert service.read_attribute(home_page, "subhead", "fr") == "Hello"


def test_condition_attributes_limit_gate_reevaluation(service, chef_job):
    """With condition_attributes, unrelated changes don't count as gate changes"""
    service.entities.update(chef_job, posted_status="posted")
    service.queue.perform_pending()
    
    assert not service.lifecycle.needs_translation(chef_job, {"id"})
    assert service.lifecycle.needs_translation(chef_job, {"posted_status"})


def test_gate_change_without_condition_attributes_counts_any_change(service, home_page):
    service.entities.update(home_page, published=True)
    service.queue.perform_pending()
    
    assert service.lifecycle.needs_translation(home_page, {"id"})
    assert service.translate_if_needed(home_page, {"id"}) == []


def test_creating_record_creates_translations(service):
    employer = Employer(name="Hyatt", profile_html="<p>A great hotel</p>")
    service.entities.save(employer)
    service.queue.perform_pending()
    
    assert len(service.translations(employer)) == 2


def test_creating_record_with_blank_values_does_not_translate(service):
    employer = Employer(name="Hyatt", profile_html=None)
    tasks = service.entities.save(employer)
    service.queue.perform_pending()
    
    assert tasks == []
    assert service.translations(employer) == []


def test_changing_automatic_attribute_retranslates(service, hilton):
    service.entities.update(hilton, profile_html="first profile update")
    service.queue.perform_pending()
    
    assert service.read_attribute(hilton, "profile_html", "fr") == "[fr] first profile update"
    assert service.read_attribute(hilton, "profile_html", "es") == "[es] first profile update"
    
    service.entities.update(hilton, profile_html="second profile update")
    service.queue.perform_pending()
    
    assert service.read_attribute(hilton, "profile_html", "fr") == "[fr] second profile update"
    assert service.read_attribute(hilton, "profile_html", "es") == "[es] second profile update"


def test_outdated_ignores_missing_translations(service, hilton):
    assert service.translations(hilton) == []
    assert not service.translations_outdated(hilton)


def test_translate_if_needed_outside_save(service, hilton):
    assert service.translations(hilton) == []
    
    service.translate_if_needed(hilton)
    service.queue.perform_pending()
    assert len(service.translations(hilton)) == 2
    
    # Translations already exist and are current
    assert service.translate_if_needed(hilton) == []


def test_translate_if_needed_is_idempotent(service, hilton):
    """A second notification without changes enqueues nothing"""
    service.entities.touch(hilton)
    service.queue.perform_pending()
    
    assert service.entities.touch(hilton) == []
    assert service.queue.pending == []


def test_only_outdated_locales_are_resubmitted(service, hilton):
    service.translate_now(hilton)
    es = service.translation_for(hilton, "es")
    es.source_checksum = "mismatch"
    service.db.commit()
    
    tasks = service.translate_if_needed(hilton)
    
    assert [t.locale for t in tasks] == ["es"]


def test_identical_content_does_not_retranslate(service, hilton):
    service.translate_now(hilton)
    assert not service.translations_outdated(hilton)
    
    tasks = service.entities.update(hilton, profile_html=hilton.profile_html)
    
    assert tasks == []
    assert service.queue.pending == []


def test_translate_enqueues_every_locale(service, hilton):
    assert service.translation_for(hilton, "es") is None
    assert service.translation_for(hilton, "fr") is None
    
    tasks = service.translate(hilton)
    assert [t.locale for t in tasks] == ["es", "fr"]
    assert service.translations(hilton) == []
    
    service.queue.perform_pending()
    assert service.translation_for(hilton, "es") is not None
    assert service.translation_for(hilton, "fr") is not None


def test_translate_forces_regeneration_of_current_locales(service, hilton):
    service.translate_now(hilton)
    
    tasks = service.translate(hilton)
    
    assert [t.locale for t in tasks] == ["es", "fr"]


def test_translate_single_locale(service, hilton):
    service.translate(hilton, "fr")
    service.queue.perform_pending()
    
    assert service.translation_for(hilton, "fr") is not None
    assert service.translation_for(hilton, "es") is None


def test_translate_now_runs_synchronously(service, hilton):
    service.translate_now(hilton)
    
    assert service.queue.pending == []
    for locale in service.translatable_locales(hilton):
        assert service.translation_for(hilton, locale) is not None


def test_translate_now_single_locale(service, hilton):
    service.translate_now(hilton, "es")
    
    assert service.translation_for(hilton, "es") is not None
    assert service.translation_for(hilton, "fr") is None


def test_checksum_stable_after_translate_now(service, admin_category, home_page):
    for entity in (admin_category, home_page):
        service.translate_now(entity)
        assert not service.translations_outdated(entity)


def test_empty_locale_list_is_a_no_op(service, db_session):
    translates(Employer, "profile_html", manual="name", into=lambda employer: [])
    employer = Employer(name="Hyatt", profile_html="<p>A great hotel</p>")
    
    tasks = service.entities.save(employer)
    
    assert tasks == []
    assert service.translations(employer) == []


def test_delete_removes_translations(service, hilton):
    service.translate_now(hilton)
    
    deleted = service.entities.delete(hilton)
    
    assert deleted == 2


def test_unregistered_model_is_ignored_by_entity_store(service, db_session):
    from localesync.services.translation_config import registry
    registry.unregister(Employer)
    employer = Employer(name="Hyatt", profile_html="<p>A great hotel</p>")
    
    assert service.entities.save(employer) == []
    assert service.entities.last_changes == {"name", "profile_html"}


@pytest.mark.parametrize("locales", [["es", "fr"], ["fr", "es", "fr"]])
def test_fixed_locale_list_order_is_kept(service, chef_job, locales):
    translates(Job, "title", into=locales)
    
    tasks = service.translate(chef_job)
    
    assert [t.locale for t in tasks] == locales


def test_page_locales_are_all_but_default(service, home_page):
    assert service.translatable_locales(home_page) == ["es", "fr"]


def test_failed_delete_keeps_translations(service, db_session, hilton, monkeypatch):
    """Translations and their entity are deleted in one transaction"""
    service.translate_now(hilton)
    hilton_id = hilton.id
    
    def failing_commit():
        raise RuntimeError("database went away")
    
    with monkeypatch.context() as patched:
        patched.setattr(db_session, "commit", failing_commit)
        with pytest.raises(RuntimeError):
            service.entities.delete(hilton)
    
    assert db_session.get(Employer, hilton_id) is not None
    assert len(service.translations(hilton)) == 2
