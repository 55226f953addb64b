#!/usr/bin/env python3
"""
Reward rule tests: XP, medal tiers, progress to next medal, achievements
"""

import unittest
from datetime import datetime, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from grammatik.core.schemas.rewards import AchievementType, MedalType, UserStats
from grammatik.services.rewards import (
    MEDAL_ORDER,
    MEDAL_REQUIREMENTS,
    calculate_progress_to_next_medal,
    calculate_xp,
    generate_achievements,
    get_current_medal,
    get_medal_display,
    get_next_medal,
    meets_requirement,
)


def stats(**fields) -> UserStats:
    return UserStats(**fields)


class TestCalculateXP(unittest.TestCase):
    """Test XP formula"""

    def test_exact_values(self):
        """Test 10 XP per correct answer and 50 per perfect score"""
        self.assertEqual(calculate_xp(3, 1), 80)
        self.assertEqual(calculate_xp(0, 0), 0)
        self.assertEqual(calculate_xp(12), 120)

    def test_monotonic(self):
        """Test XP never decreases when either input grows"""
        for perfect in range(0, 4):
            values = [calculate_xp(correct, perfect) for correct in range(0, 30)]
            self.assertEqual(values, sorted(values))
        for correct in range(0, 4):
            values = [calculate_xp(correct, perfect) for perfect in range(0, 30)]
            self.assertEqual(values, sorted(values))


class TestMedals(unittest.TestCase):
    """Test medal evaluation"""

    def test_zero_stats_have_no_medal(self):
        """Test a brand new user qualifies for nothing"""
        self.assertEqual(get_current_medal(stats()), MedalType.NONE)

    def test_diamond(self):
        """Test stats meeting diamond but not emerald XP"""
        medal = get_current_medal(stats(total_xp=3000, correct_answers=300, accuracy_percentage=86))
        self.assertEqual(medal, MedalType.DIAMOND)

    def test_can_skip_tiers(self):
        """Test gold is awarded directly when gold thresholds are met"""
        medal = get_current_medal(stats(total_xp=800, correct_answers=120, accuracy_percentage=81))
        self.assertEqual(medal, MedalType.GOLD)

    def test_all_three_requirements_needed(self):
        """Test a tier is withheld when only accuracy is missing"""
        medal = get_current_medal(stats(total_xp=10000, correct_answers=1000, accuracy_percentage=59))
        self.assertEqual(medal, MedalType.NONE)

        medal = get_current_medal(stats(total_xp=10000, correct_answers=1000, accuracy_percentage=75))
        self.assertEqual(medal, MedalType.SILVER)

    def test_returned_medal_requirements_are_met(self):
        """Test the returned tier is always fully satisfied"""
        samples = [
            stats(total_xp=xp, correct_answers=correct, accuracy_percentage=accuracy)
            for xp in (0, 49, 50, 260, 760, 2600, 5000)
            for correct in (0, 10, 55, 100, 260, 500)
            for accuracy in (0, 60, 70, 80, 85, 90, 100)
        ]
        for sample in samples:
            medal = get_current_medal(sample)
            if medal != MedalType.NONE:
                self.assertTrue(meets_requirement(sample, MEDAL_REQUIREMENTS[medal]))

    def test_next_medal(self):
        """Test next tier follows the fixed order"""
        self.assertEqual(get_next_medal(MedalType.NONE), MedalType.BRONZE)
        self.assertEqual(get_next_medal(MedalType.BRONZE), MedalType.SILVER)
        self.assertEqual(get_next_medal(MedalType.DIAMOND), MedalType.EMERALD)
        self.assertIsNone(get_next_medal(MedalType.EMERALD))

    def test_order_is_ascending(self):
        """Test requirement thresholds grow along the medal order"""
        requirements = [MEDAL_REQUIREMENTS[medal] for medal in MEDAL_ORDER[1:]]
        self.assertEqual([r.xp for r in requirements], sorted(r.xp for r in requirements))


class TestProgressToNextMedal(unittest.TestCase):
    """Test progress toward the next tier"""

    def test_bottleneck_dimension(self):
        """Test progress is limited by the weakest requirement"""
        current = stats(total_xp=250, correct_answers=40, accuracy_percentage=70)
        self.assertEqual(calculate_progress_to_next_medal(current, MedalType.SILVER), 80)

    def test_components_capped_at_100(self):
        """Test an over-satisfied dimension does not lift the result"""
        current = stats(total_xp=10000, correct_answers=25, accuracy_percentage=100)
        self.assertEqual(calculate_progress_to_next_medal(current, MedalType.SILVER), 50)

    def test_floors_to_integer(self):
        """Test fractional progress is floored"""
        current = stats(total_xp=100, correct_answers=100, accuracy_percentage=100)
        # 100 / 750 = 13.33%
        self.assertEqual(calculate_progress_to_next_medal(current, MedalType.GOLD), 13)

    def test_no_next_medal(self):
        """Test progress is 100 when already at the top"""
        self.assertEqual(calculate_progress_to_next_medal(stats(), None), 100)

    def test_zero_stats_toward_bronze(self):
        """Test a new user has zero progress toward bronze"""
        self.assertEqual(calculate_progress_to_next_medal(stats(), MedalType.BRONZE), 0)


class TestAchievements(unittest.TestCase):
    """Test achievement rules"""

    def setUp(self):
        self.now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

    def ids(self, **fields):
        return [a.id for a in generate_achievements(stats(**fields), now=self.now)]

    def test_nothing_for_new_user(self):
        """Test no achievements for zero stats"""
        self.assertEqual(self.ids(), [])

    def test_streak_achievements_are_additive(self):
        """Test a 35-day streak earns both streak badges"""
        self.assertEqual(self.ids(current_streak=35), ["week_streak", "month_streak"])
        self.assertEqual(self.ids(current_streak=7), ["week_streak"])
        self.assertEqual(self.ids(current_streak=6), [])

    def test_perfectionist_needs_volume(self):
        """Test accuracy badge requires 100+ questions"""
        self.assertEqual(self.ids(accuracy_percentage=96, questions_answered=99), [])
        self.assertEqual(self.ids(accuracy_percentage=95, questions_answered=100), ["perfectionist"])

    def test_question_master(self):
        """Test 1000 answered questions badge"""
        achievements = generate_achievements(stats(questions_answered=1000, accuracy_percentage=50), now=self.now)
        self.assertEqual(len(achievements), 1)
        self.assertEqual(achievements[0].name, "Question Master")
        self.assertEqual(achievements[0].type, AchievementType.QUESTIONS)
        self.assertEqual(achievements[0].earned_at, self.now)


class TestMedalDisplay(unittest.TestCase):
    """Test medal display lookup"""

    def test_known_medal(self):
        self.assertEqual(get_medal_display(MedalType.GOLD).emoji, "🥇")
        self.assertEqual(get_medal_display("emerald").name, "Emerald")

    def test_unknown_falls_back_to_none(self):
        self.assertEqual(get_medal_display("platinum").name, "Ingen Medalje")
        self.assertEqual(get_medal_display(None).name, "Ingen Medalje")


if __name__ == '__main__':
    unittest.main()
