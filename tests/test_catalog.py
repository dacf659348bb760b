from academic_admin import db
from academic_admin.models import Level
from academic_admin.progression import StepCatalog, StepCatalogEntry, load_catalog
from academic_admin.progression.catalog import find_level_by_step_label


def _entry(code, steps, is_parallel=False):
    return StepCatalogEntry(level_code=code, steps=tuple(steps), clubs=frozenset(), is_parallel=is_parallel)


def test_lookup_by_step_label(curriculum):
    catalog = load_catalog()

    assert catalog.find_level_by_step_label("Step 1").level_code == "BN1"
    assert catalog.find_level_by_step_label("Step 23").level_code == "IN2"
    assert catalog.find_level_by_step_label("Step 45").level_code == "AU3"
    assert catalog.find_level_by_step_label("Step 46") is None
    assert catalog.find_level_by_step_label(None) is None


def test_orientation_level_is_parallel(curriculum):
    entry = find_level_by_step_label("Step 0")
    assert entry.level_code == "ESS"
    assert entry.is_parallel is True


def test_successor_crosses_level_boundary(curriculum):
    catalog = load_catalog()

    label, entry = catalog.successor("Step 5")
    assert label == "Step 6"
    assert entry.level_code == "BN2"

    label, entry = catalog.successor("Step 6")
    assert (label, entry.level_code) == ("Step 7", "BN2")


def test_successor_at_end_of_curriculum(curriculum):
    assert load_catalog().successor("Step 45") is None
    assert load_catalog().successor("WELCOME") is None


def test_first_level_wins_for_duplicate_labels():
    catalog = StepCatalog([
        _entry("B1", ["Step 5", "Step 6"]),
        _entry("B1-BIS", ["Step 6", "Step 7"]),
    ])
    assert catalog.find_level_by_step_label("Step 6").level_code == "B1"
    assert catalog.find_level_by_step_label("Step 7").level_code == "B1-BIS"


def test_catalog_is_loaded_in_sort_order(client):
    db.session.add(Level(code="LATE", steps=["Step 1"], clubs=[], sort_order=5))
    db.session.add(Level(code="EARLY", steps=["Step 1"], clubs=[], sort_order=1))
    db.session.commit()

    assert load_catalog().find_level_by_step_label("Step 1").level_code == "EARLY"


def test_catalog_is_cached(curriculum):
    assert load_catalog() is load_catalog()


def test_level_changes_invalidate_cache(curriculum):
    before = load_catalog()
    assert before.find_level_by_step_label("Step 46") is None

    db.session.add(Level(code="AU4", steps=["Step 46"], clubs=[], sort_order=20))
    db.session.commit()

    after = load_catalog()
    assert after is not before
    assert after.find_level_by_step_label("Step 46").level_code == "AU4"


def test_rolled_back_level_is_not_cached(client):
    db.session.add(Level(code="DRAFT", steps=["Step 1"], clubs=[], sort_order=1))
    db.session.flush()
    assert load_catalog().find_level_by_step_label("Step 1").level_code == "DRAFT"

    db.session.rollback()

    assert Level.query.count() == 0
    assert load_catalog().find_level_by_step_label("Step 1") is None


def test_committed_level_update_refreshes_cache(curriculum):
    assert load_catalog().get_level("BN1").is_parallel is False

    level = Level.query.filter_by(code="BN1").first()
    level.is_parallel = True
    db.session.commit()

    assert load_catalog().get_level("BN1").is_parallel is True
