"""
Tests for eviction defense evaluation and ranking.
"""
from remedypilot.engine import DefenseEvaluator, evaluate_defenses, rank_defenses
from remedypilot.models import (
    AppealWindow,
    Classification,
    Confidence,
    Defense,
    DefenseStrength,
    Domain,
    EligibilityStatus,
    NoticeCompliance,
    TimingResult,
)

from tests.conftest import make_category, make_defense, make_eviction_policy, make_policy, make_situation

SHORT_NOTICE_14 = NoticeCompliance(days_between=10, required_days=14, compliant=False)
SHORT_NOTICE_3 = NoticeCompliance(days_between=1, required_days=3, compliant=False)


def run(policy, category="nonpayment", timing=None, **fields):
    return evaluate_defenses(
        make_situation(Domain.EVICTION_DEFENSE, **fields),
        Classification(category=category),
        timing or TimingResult(notice=NoticeCompliance()),
        policy,
    )


def strengths(outcome):
    return [(d.id, d.strength) for d in outcome.defenses]


class TestNoticeDefense:

    def test_declared_notice_defense_upgraded(self, eviction_policy):
        outcome = run(eviction_policy, timing=TimingResult(notice=SHORT_NOTICE_14))
        ids = [d.id for d in outcome.defenses]
        assert ids.count("improper_notice") == 1
        assert outcome.defenses[0].id == "improper_notice"
        assert outcome.defenses[0].strength is DefenseStrength.STRONG
        assert outcome.status is EligibilityStatus.ELIGIBLE
        assert outcome.confidence is Confidence.HIGH
        assert outcome.reasons[0] == "Notice period may be insufficient: 14 days required, 10 days given"

    def test_synthetic_notice_defense(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity", timing=TimingResult(notice=SHORT_NOTICE_3))
        top = outcome.defenses[0]
        assert top.id == "improper_notice"
        assert top.strength is DefenseStrength.STRONG
        assert top.citation == "Test Code 505(a)"
        assert "3 days required, but only 1 days given" in top.description

    def test_compliant_notice_stays_potential(self, eviction_policy):
        compliant = NoticeCompliance(days_between=14, required_days=14, compliant=True)
        outcome = run(eviction_policy, timing=TimingResult(notice=compliant))
        assert ("improper_notice", DefenseStrength.POTENTIAL) in strengths(outcome)

    def test_unknown_compliance_adds_nothing(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity")
        assert [d.id for d in outcome.defenses] == ["lack_of_knowledge"]

    def test_no_notice_received_adds_synthetic_defense(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity", notice_received=False)
        top = outcome.defenses[0]
        assert top.id == "improper_notice"
        assert top.strength is DefenseStrength.STRONG
        assert top.description == "Tenant reports that no notice was received before the case was filed."

    def test_notice_received_adds_nothing(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity", notice_received=True)
        assert [d.id for d in outcome.defenses] == ["lack_of_knowledge"]

    def test_declared_notice_defense_triggered_by_no_notice(self):
        policy = make_policy(
            domain=Domain.EVICTION_DEFENSE,
            default_category="nonpayment",
            categories=[
                make_category(
                    "nonpayment",
                    notice_days=14,
                    defenses=(
                        make_defense("improper_notice", DefenseStrength.STRONG,
                                     when=[("notice_received", [False])], notice_defense=True),
                    ),
                ),
            ],
        )
        assert strengths(run(policy, notice_received=False)) == [("improper_notice", DefenseStrength.STRONG)]
        assert strengths(run(policy)) == [("improper_notice", DefenseStrength.POTENTIAL)]


class TestCategoryDefenses:

    def test_all_potential_keeps_declared_order(self, eviction_policy):
        outcome = run(eviction_policy)
        assert [d.id for d in outcome.defenses] == ["improper_notice", "payment_made", "habitability", "retaliation"]
        assert outcome.status is EligibilityStatus.LIMITED
        assert outcome.confidence is Confidence.LOW
        assert outcome.reasons == ["Only potential defenses identified; each needs supporting facts"]

    def test_strong_trigger(self, eviction_policy):
        outcome = run(eviction_policy, payment_made=True)
        assert strengths(outcome)[0] == ("payment_made", DefenseStrength.STRONG)
        assert outcome.status is EligibilityStatus.ELIGIBLE
        assert outcome.confidence is Confidence.HIGH
        assert outcome.reasons == ["Strong defense identified: Payment Made"]

    def test_valued_trigger_is_case_insensitive(self, eviction_policy):
        outcome = run(eviction_policy, property_condition="Uninhabitable")
        assert strengths(outcome)[0] == ("habitability", DefenseStrength.MODERATE)
        assert outcome.status is EligibilityStatus.ELIGIBLE
        assert outcome.confidence is Confidence.MEDIUM

    def test_other_value_does_not_trigger(self, eviction_policy):
        outcome = run(eviction_policy, property_condition="fine")
        assert ("habitability", DefenseStrength.POTENTIAL) in strengths(outcome)

    def test_equal_strength_keeps_policy_order(self, eviction_policy):
        outcome = run(eviction_policy, recent_complaint=True, property_condition="poor", payment_made=True)
        assert strengths(outcome) == [
            ("payment_made", DefenseStrength.STRONG),
            ("habitability", DefenseStrength.MODERATE),
            ("retaliation", DefenseStrength.MODERATE),
            ("improper_notice", DefenseStrength.POTENTIAL),
        ]

    def test_procedure(self, eviction_policy):
        assert run(eviction_policy).procedure == "answer"


class TestUniversalDefenses:

    def test_self_help_from_locks(self, eviction_policy):
        outcome = run(eviction_policy, locks_changed=True)
        top = outcome.defenses[0]
        assert top.id == "self_help_eviction"
        assert top.strength is DefenseStrength.STRONG
        assert top.citation == "Test Code 512"

    def test_self_help_from_utilities(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity", utilities_shut_off=True)
        assert outcome.defenses[0].id == "self_help_eviction"

    def test_partial_payment(self, eviction_policy):
        outcome = run(eviction_policy, partial_payment_accepted=True)
        partial = outcome.defenses[0]
        assert partial.id == "partial_payment_acceptance"
        assert partial.strength is DefenseStrength.MODERATE
        assert partial.citation is None

    def test_universal_defenses_apply_to_any_category(self, eviction_policy):
        outcome = run(eviction_policy, "illegal-activity", partial_payment_accepted=True, locks_changed=True)
        assert [d.id for d in outcome.defenses] == [
            "self_help_eviction",
            "partial_payment_acceptance",
            "lack_of_knowledge",
        ]


class TestStatus:

    def test_no_defenses(self):
        policy = make_policy(domain=Domain.EVICTION_DEFENSE, categories=[make_category("unknown")])
        outcome = run(policy, "unknown")
        assert outcome.defenses == []
        assert outcome.status is EligibilityStatus.UNKNOWN
        assert outcome.confidence is Confidence.LOW
        assert outcome.reasons == ["No defenses identified from the information provided"]

    def test_appeal_window_passed_limits_relief(self, eviction_policy):
        timing = TimingResult(appeal=AppealWindow(window_days=10, days_since_judgment=12, days_remaining=0))
        outcome = run(eviction_policy, timing=timing, payment_made=True)
        assert outcome.status is EligibilityStatus.LIMITED
        assert outcome.blocking_factors[0].factor == "Appeal window passed"
        assert outcome.reasons[-1] == "Judgment was entered 12 days ago; the 10-day appeal window has passed"

    def test_open_appeal_window(self, eviction_policy):
        timing = TimingResult(appeal=AppealWindow(window_days=10, days_since_judgment=3, days_remaining=7))
        outcome = run(eviction_policy, timing=timing, payment_made=True)
        assert outcome.status is EligibilityStatus.ELIGIBLE
        assert outcome.blocking_factors == []

    def test_evaluator_class(self):
        policy = make_eviction_policy(appeal_window_days=5)
        evaluator = DefenseEvaluator(policy)
        outcome = evaluator.evaluate(
            make_situation(Domain.EVICTION_DEFENSE),
            Classification(category="nonpayment"),
            TimingResult(),
        )
        assert len(outcome.defenses) == 4


class TestRanking:

    def test_stable_sort(self):
        def defense(id, strength):
            return Defense(id=id, name=id, strength=strength, description="")

        ranked = rank_defenses([
            defense("a", DefenseStrength.POTENTIAL),
            defense("b", DefenseStrength.MODERATE),
            defense("c", DefenseStrength.STRONG),
            defense("d", DefenseStrength.MODERATE),
            defense("e", DefenseStrength.STRONG),
        ])
        assert [d.id for d in ranked] == ["c", "e", "b", "d", "a"]

    def test_empty(self):
        assert rank_defenses([]) == []
