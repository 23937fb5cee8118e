from itertools import product

import pydantic
import pytest

from composition_core.constants import Category, Leg
from composition_core.history import PlayerHistory
from composition_core.locks import (
    current_lock, effective_lock, future_lock, future_lock_group, is_locked_out,
)
from composition_core.test_helpers import quick_player

def test_second_match_at_tier_locks_classic():
    assert future_lock({1: 1}, 1) == 1
    assert future_lock({4: 1}, 4) == 4
    assert future_lock({4: 1, 6: 1}, 4) == 4

def test_three_tier_history_counts_stronger_matches():
    assert future_lock({1: 1, 3: 1}, 2) == 2
    assert future_lock({3: 1}, 2) == 3
    assert future_lock({3: 1, 4: 1}, 2) == 3

def test_match_in_stronger_team_warns_about_weaker_lock():
    # one match in team 4 then one in team 1 binds the player to team 4
    assert future_lock({4: 1}, 1) == 4
    assert current_lock({1: 1, 4: 1}) == 4

def test_absent_history_never_locks():
    for tier in range(1, 8):
        assert future_lock(None, tier) is None
        assert future_lock({}, tier) is None
        assert future_lock_group(None, tier) is None

def test_group_threshold_is_three():
    assert future_lock_group({2: 1}, 2) is None
    assert future_lock_group({2: 2}, 2) == 2
    assert future_lock_group({2: 1, 5: 1}, 5) == 5
    # already bound: playing weaker confirms the existing lock
    assert future_lock_group({3: 3, 5: 1}, 5) == 3
    assert future_lock_group({1: 3, 3: 1}, 4) == 1

def test_category_selects_tally():
    h = PlayerHistory(player="a", leg=Leg.FIRST,
                      by_category={Category.MEN: {1: 1}, Category.WOMEN: {3: 1}})
    assert future_lock(h, 1, Category.MEN) == 1
    assert future_lock(h, 1, Category.WOMEN) == 3
    assert future_lock(h, 2, Category.MEN) == 2
    # group league merges both categories
    assert future_lock_group(h, 2, Category.WOMEN) == 3

def test_prediction_matches_lock_after_the_match():
    tiers = [1, 2, 3, 4]
    for threshold in (2, 3):
        for counts in product([0, 1, 2, 3], repeat=3):
            for chosen in ((1, 2, 3), (1, 3, 4), (2, 3, 4)):
                history = {t: n for t, n in zip(chosen, counts) if n}
                if not history:
                    continue
                for candidate in tiers:
                    after = dict(history)
                    after[candidate] = after.get(candidate, 0) + 1
                    expected = current_lock(after, threshold)
                    assert future_lock(history, candidate, threshold=threshold) == expected
                    assert future_lock_group(history, candidate, threshold=threshold) == expected

def test_lock_stays_put_under_legal_matches():
    history = {2: 1, 3: 1}
    lock = current_lock(history)
    assert lock == 3
    for tier in (3, 4, 5, 3, 6):
        history[tier] = history.get(tier, 0) + 1
        assert current_lock(history) == lock

def test_future_lock_is_deterministic():
    h = {1: 1, 2: 1, 5: 2}
    assert [future_lock(h, 3) for _ in range(5)] == [2] * 5

def test_current_lock_is_strongest_tier_reaching_threshold():
    assert current_lock({1: 1}) is None
    assert current_lock({1: 2}) == 1
    assert current_lock({1: 1, 3: 1}) == 3
    assert current_lock({1: 2, 4: 1}) == 1
    assert current_lock({2: 2}, threshold=3) is None
    assert current_lock(None) is None

def test_effective_lock_combines_hint():
    p = quick_player("a", locked={"men": {"first": 3}})
    assert effective_lock(p, {1: 2}, Leg.FIRST, category=Category.MEN) == 3
    assert effective_lock(p, {1: 1, 5: 1}, Leg.FIRST, category=Category.MEN) == 5
    assert effective_lock(p, {}, Leg.SECOND, category=Category.MEN) is None

def test_hint_only_applies_to_its_championship():
    p = quick_player("w", gender="F", locked={"women": {"first": 2}, "group": {"first": 4}})
    assert effective_lock(p, {}, Leg.FIRST, category=Category.WOMEN) == 2
    assert effective_lock(p, {}, Leg.FIRST, category=Category.MEN) is None
    assert effective_lock(p, {}, Leg.FIRST, threshold=3) == 4

def test_locked_out_only_for_stronger_tiers():
    assert is_locked_out(3, 2)
    assert not is_locked_out(3, 3)
    assert not is_locked_out(3, 4)
    assert not is_locked_out(None, 1)

def test_unknown_hint_scope_rejected():
    with pytest.raises(pydantic.ValidationError):
        quick_player("x", locked={"paris": {"first": 1}})
