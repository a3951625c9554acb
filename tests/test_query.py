from datetime import timedelta

from zawaj.core.clock import today, years_before
from zawaj.models.block import Block
from zawaj.models.swipe import Swipe
from zawaj.modules.discovery.eligibility import require_persona
from zawaj.modules.discovery.query import build_candidate_predicate, collect_exclusions
from zawaj.schemas.preference import PreferenceFilters


def candidate_ids(store, viewer, prefs=None, excluded=None):
    predicate = build_candidate_predicate(
        viewer.id,
        require_persona(viewer),
        prefs or PreferenceFilters(),
        excluded or {viewer.id},
        today(),
    )
    return {u.id for u in store.find_candidates(predicate, 200)}


def test_collect_exclusions():
    blocks = [Block(blocker_id="me", blocked_id="b1"), Block(blocker_id="b2", blocked_id="me")]
    swipes = [Swipe(from_user_id="me", to_user_id="s1", direction="left")]

    excluded = collect_exclusions("me", blocks, swipes, {"seen1"}, ["sess1", ""])

    assert excluded == {"me", "b1", "b2", "s1", "seen1", "sess1"}


def test_hard_constraints(store, make_user):
    viewer = make_user("male")
    ok = make_user("female")
    make_user("male")
    make_user("female", age=17)
    make_user("female", muslim_affirmed=False)
    make_user("female", discoverable=False)
    onboarded = make_user("female", muslim_affirmed=False, onboarding_completed=True)

    assert candidate_ids(store, viewer) == {ok.id, onboarded.id}


def test_excluded_ids_are_dropped(store, make_user):
    viewer = make_user("male")
    a = make_user("female")
    b = make_user("female")

    assert candidate_ids(store, viewer, excluded={viewer.id, a.id}) == {b.id}


def test_age_bounds_are_inclusive(store, make_user):
    viewer = make_user("male")
    day = today()
    by_age = {
        age: make_user("female", dob=years_before(day, age))
        for age in (24, 25, 30, 31)
    }

    found = candidate_ids(store, viewer, PreferenceFilters(age_min=25, age_max=30))

    assert found == {by_age[25].id, by_age[30].id}


def test_age_max_keeps_day_before_next_birthday(store, make_user):
    viewer = make_user("male")
    almost_31 = make_user("female", dob=years_before(today(), 31) + timedelta(days=1))

    assert almost_31.id in candidate_ids(store, viewer, PreferenceFilters(age_max=30))


def test_unset_religiousness_passes(store, make_user):
    viewer = make_user("male")
    low = make_user("female", religiousness=2)
    high = make_user("female", religiousness=4)
    unknown = make_user("female")

    found = candidate_ids(store, viewer, PreferenceFilters(religiousness_min=3))

    assert found == {high.id, unknown.id}
    assert low.id not in found


def test_allow_lists_and_height(store, make_user):
    viewer = make_user("male")
    jordan = make_user("female", country="Jordan", height_cm=165)
    make_user("female", country="Egypt", height_cm=165)
    make_user("female", country="Jordan", height_cm=185)

    prefs = PreferenceFilters(countries=["Jordan"], height_max_cm=170)

    assert candidate_ids(store, viewer, prefs) == {jordan.id}


def test_origin_matches_by_containment(store, make_user):
    viewer = make_user("male")
    sudanese = make_user("female", origin='["Egypt", "Sudan"]')
    make_user("female", origin='["Jordan"]')
    make_user("female")

    prefs = PreferenceFilters(origin_preferences=["Sudan", "Morocco"])

    assert candidate_ids(store, viewer, prefs) == {sudanese.id}


def test_relocate_preference(store, make_user):
    viewer = make_user("male")
    mover = make_user("female", relocate=True)
    make_user("female", relocate=False)

    assert candidate_ids(store, viewer, PreferenceFilters(relocate_preference=True)) == {mover.id}


def test_guardian_candidates(store, make_user):
    viewer = make_user("mother", "son")
    female = make_user("female")
    other_guardian = make_user("mother", "daughter")
    make_user("male")
    make_user("mother", "son")
    make_user("mother", None)

    assert candidate_ids(store, viewer) == {female.id, other_guardian.id}
    assert candidate_ids(store, viewer, PreferenceFilters(show_only_mothers=True)) == {
        other_guardian.id
    }


def test_show_only_mothers_ignored_for_individuals(store, make_user):
    viewer = make_user("male")
    female = make_user("female")

    assert candidate_ids(store, viewer, PreferenceFilters(show_only_mothers=True)) == {female.id}
