"""
Tests for first-match keyword classification.

Rule order is policy: the earliest matching rule wins.
"""
import pytest

from remedypilot.engine import classify, match_keyword_groups
from remedypilot.models import Domain, DispositionKind

from tests.conftest import make_category, make_policy, make_situation


class TestMatchKeywordGroups:

    def test_single_group(self):
        assert match_keyword_groups("charges dismissed", (("dismiss", "nolle"),)) == ("dismiss",)

    def test_all_groups_must_match(self):
        groups = (("guilty", "convict"), ("felony",))
        assert match_keyword_groups("guilty of a felony", groups) == ("guilty", "felony")
        assert match_keyword_groups("guilty of a misdemeanor", groups) is None

    def test_first_keyword_in_group_order_reported(self):
        assert match_keyword_groups("convicted after guilty plea", (("guilty", "convict"),)) == ("guilty",)

    def test_empty_text(self):
        assert match_keyword_groups("", (("dismiss",),)) is None


class TestCriminalClassification:
    """Bundled TN table."""

    @pytest.mark.parametrize("outcome, charge_type, expected", [
        ("Dismissed", "Theft", "dismissed-charge"),
        ("nolle prosequi", "", "dismissed-charge"),
        ("Not guilty", "Assault", "acquitted-charge"),
        ("Judicial diversion", "Theft", "diversion"),
        ("Guilty plea", "Class E felony theft", "felony-conviction"),
        ("Convicted", "Class A misdemeanor", "misdemeanor-conviction"),
        ("Guilty", "Theft", "conviction"),
    ])
    def test_categories(self, tn_criminal, outcome, charge_type, expected):
        situation = make_situation(jurisdiction="TN", outcome=outcome, charge_type=charge_type or "unknown")
        assert classify(situation, tn_criminal).category == expected

    def test_not_guilty_precedes_guilty(self, tn_criminal):
        result = classify(make_situation(outcome="not guilty"), tn_criminal)
        assert result.category == "acquitted-charge"
        assert result.matched_keywords == ("not guilty",)
        assert result.rule_index == 1

    def test_all_of_reports_one_keyword_per_group(self, tn_criminal):
        result = classify(make_situation(outcome="guilty plea", charge_type="Felony theft"), tn_criminal)
        assert result.category == "felony-conviction"
        assert result.matched_keywords == ("guilty", "felony")

    def test_whitespace_and_case_normalized(self, tn_criminal):
        result = classify(make_situation(outcome="NOT   Guilty"), tn_criminal)
        assert result.category == "acquitted-charge"

    def test_no_text_uses_default(self, tn_criminal):
        result = classify(make_situation(), tn_criminal)
        assert result.category == "unknown"
        assert result.is_default
        assert result.matched_keywords == ()

    def test_unmatched_text_uses_default(self, tn_criminal):
        result = classify(make_situation(outcome="still waiting to hear"), tn_criminal)
        assert result.category == "unknown"
        assert result.rule_index is None


class TestEvictionClassification:

    def test_nonpayment_wins_over_lease_violation(self, tn_eviction):
        situation = make_situation(
            Domain.EVICTION_DEFENSE,
            "TN",
            reason_description="Lease violation for a pet and I owe rent",
        )
        assert classify(situation, tn_eviction).category == "nonpayment"

    def test_illegal_activity(self, tn_eviction):
        situation = make_situation(Domain.EVICTION_DEFENSE, "TN", reason_description="drug activity reported")
        result = classify(situation, tn_eviction)
        assert result.category == "illegal-activity"
        assert result.matched_keywords == ("drug",)

    def test_only_reason_is_read(self, tn_eviction):
        situation = make_situation(
            Domain.EVICTION_DEFENSE,
            "TN",
            reason_description="holdover after lease expired",
            outcome="drug",
        )
        assert classify(situation, tn_eviction).category == "holdover"

    def test_default_category(self, tn_eviction):
        result = classify(make_situation(Domain.EVICTION_DEFENSE, "TN"), tn_eviction)
        assert result.category == "nonpayment"
        assert result.is_default


class TestRuleOrder:
    """The same text classifies differently when the policy reorders rules."""

    categories = [
        make_category("felony", DispositionKind.CONVICTION, 5),
        make_category("dismissed", DispositionKind.DISMISSAL),
        make_category("unknown", DispositionKind.UNKNOWN),
    ]

    def test_first_rule_wins(self):
        policy = make_policy(
            rules=[("felony", ["guilty"]), ("dismissed", ["dismiss"])],
            categories=self.categories,
        )
        situation = make_situation(outcome="found guilty, later dismissed")
        assert classify(situation, policy).category == "felony"

    def test_reversed_order(self):
        policy = make_policy(
            rules=[("dismissed", ["dismiss"]), ("felony", ["guilty"])],
            categories=self.categories,
        )
        situation = make_situation(outcome="found guilty, later dismissed")
        assert classify(situation, policy).category == "dismissed"
