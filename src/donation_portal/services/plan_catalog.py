import logging
from typing import Iterable, Mapping

from donation_portal.models.donation import DonationPlan, PlanInterval

logger = logging.getLogger(__name__)

MONTHLY_TIERS = {
    100: "PLN_6esb90pg4anp9zq",
    200: "PLN_gbdvu0avcfc0pam",
    500: "PLN_cxf9b3batni3vbw",
    1000: "PLN_pjim6eus6gb4cps",
    2000: "PLN_3qmpozj5pw7zywn",
    5000: "PLN_wbvihpcg770t4et",
}

ANNUAL_TIERS = {
    1200: "PLN_95wv2r523jlipyo",
    2400: "PLN_71kwj3au6tcys9p",
    6000: "PLN_zc8fhee0zlrwtqf",
    12000: "PLN_bm2ybbv7m421xbv",
    15000: "PLN_2yp34fcr8vj03j5",
    20000: "PLN_ecx205ldzx198yh",
}

ONE_OFF_TIERS = (1000, 2000, 3000, 4000, 5000, 10000)


def format_amount(amount: int, currency: str = "ZAR") -> str:
    """Whole-unit display amount, e.g. ``R1,000`` for ZAR or ``USD 50`` otherwise."""
    symbol = "R" if currency == "ZAR" else f"{currency} "
    return f"{symbol}{amount:,}"


class PlanCatalog:
    """Read-only registry of donation plans, keyed by plan id."""

    def __init__(self, plans: Iterable[DonationPlan]):
        self._plans: tuple[DonationPlan, ...] = tuple(plans)
        self._by_id: dict[str, DonationPlan] = {}
        for plan in self._plans:
            if plan.id in self._by_id:
                raise ValueError(f"Duplicate plan id: {plan.id}")
            self._by_id[plan.id] = plan

    def __len__(self) -> int:
        return len(self._plans)

    def __iter__(self):
        return iter(self._plans)

    def all(self) -> tuple[DonationPlan, ...]:
        return self._plans

    def get_plan_by_id(self, plan_id: str) -> DonationPlan | None:
        return self._by_id.get(plan_id)

    def get_plan_by_code(self, plan_code: str) -> DonationPlan | None:
        for plan in self._plans:
            if plan.plan_code is not None and plan.plan_code == plan_code:
                return plan
        return None

    def plans_for_interval(self, interval: PlanInterval) -> list[DonationPlan]:
        return [plan for plan in self._plans if plan.interval == interval]


def _monthly(amount: int, plan_code: str) -> DonationPlan:
    label = format_amount(amount)
    return DonationPlan(
        id=f"monthly-{amount}",
        name=f"{label} Monthly",
        amount=amount,
        interval="monthly",
        plan_code=plan_code,
        description=f"Support with {label} monthly",
    )


def _annual(amount: int, plan_code: str) -> DonationPlan:
    label = format_amount(amount)
    return DonationPlan(
        id=f"annual-{amount}",
        name=f"{label} Annually",
        amount=amount,
        interval="annually",
        plan_code=plan_code,
        description=f"Support with {label} annually",
    )


def _one_off(amount: int) -> DonationPlan:
    label = format_amount(amount)
    return DonationPlan(
        id=f"one-off-{amount}",
        name=f"{label} One-Off",
        amount=amount,
        interval="one-off",
        description=f"Support with {label} one-time donation",
    )


def default_plans(plan_code_overrides: Mapping[str, str] | None = None) -> list[DonationPlan]:
    overrides = dict(plan_code_overrides or {})

    plans = [_monthly(amount, code) for amount, code in MONTHLY_TIERS.items()]
    plans += [_annual(amount, code) for amount, code in ANNUAL_TIERS.items()]
    plans = [
        plan.model_copy(update={"plan_code": overrides.pop(plan.id)}) if plan.id in overrides else plan
        for plan in plans
    ]

    one_off = [_one_off(amount) for amount in ONE_OFF_TIERS]
    for plan in one_off:
        if overrides.pop(plan.id, None) is not None:
            logger.warning("Ignoring plan code override for one-off plan", extra={"plan_id": plan.id})

    if overrides:
        logger.warning("Plan code overrides for unknown plans", extra={"plan_ids": sorted(overrides)})

    return plans + one_off


def build_catalog(plan_code_overrides: Mapping[str, str] | None = None) -> PlanCatalog:
    return PlanCatalog(default_plans(plan_code_overrides))
