"""
Employee Domain Model (``payroll_kernel.domain.employee``).

Responsibility
--------------
The nouns of the payroll core: employees, their variant-specific pay
terms, union membership, timecards, sales receipts and service charges.

An employee is a tagged union: the ``kind`` discriminant plus exactly one
payload (``HourlyTerms``, ``SalariedTerms`` or ``CommissionedTerms``).
Changing variant builds a new ``Employee`` with a new payload; payloads
are never converted in place.

Invariants enforced
-------------------
* ``kind`` always matches the payload type.
* All monetary fields and hours use ``Decimal`` -- NEVER ``float``.
* One timecard per date per hourly employee.
* Sales receipts and service charges carry a stable UUID handle so a
  single entry can be removed even when another has equal values.
* ``clone()`` returns a copy that shares no mutable state with the
  original (used by the snapshot store).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from payroll_kernel.domain.values import (
    ZERO,
    BankAccount,
    EmployeeKind,
    PaymentMethod,
)


@dataclass(frozen=True)
class TimeCard:
    """Hours worked by an hourly employee on one date."""
    work_date: date
    hours: Decimal


@dataclass(frozen=True)
class SalesReceipt:
    """A sale credited to a commissioned employee."""
    sale_date: date
    amount: Decimal
    receipt_id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class ServiceCharge:
    """An additional union charge against a member."""
    charge_date: date
    amount: Decimal
    charge_id: UUID = field(default_factory=uuid4)


@dataclass
class UnionMembership:
    """
    Union membership owned by exactly one employee.

    ``accumulated_debt`` and ``last_paid_date`` record the latest union
    settlement for hourly employees. ``prior_debt`` and ``prior_paid_date``
    hold the state that settlement replaced, so a payroll re-run for the
    last paid date sees the same baseline as the original run.
    """

    member_id: str
    daily_due: Decimal
    accumulated_debt: Decimal = ZERO
    last_paid_date: date | None = None
    prior_debt: Decimal = ZERO
    prior_paid_date: date | None = None
    service_charges: list[ServiceCharge] = field(default_factory=list)

    def clone(self) -> UnionMembership:
        return replace(self, service_charges=list(self.service_charges))

    def add_charge(self, charge: ServiceCharge) -> None:
        self.service_charges.append(charge)

    def remove_charge(self, charge_id: UUID) -> ServiceCharge | None:
        for i, charge in enumerate(self.service_charges):
            if charge.charge_id == charge_id:
                return self.service_charges.pop(i)
        return None

    def charges_between(self, start: date, end: date) -> Decimal:
        """Sum of service charges dated within [start, end]."""
        return sum(
            (c.amount for c in self.service_charges if start <= c.charge_date <= end),
            ZERO,
        )

    def settlement_baseline(self, payday: date) -> tuple[Decimal, date | None]:
        """Debt and last paid date in force before settling ``payday``."""
        if self.last_paid_date is not None and self.last_paid_date == payday:
            return self.prior_debt, self.prior_paid_date
        return self.accumulated_debt, self.last_paid_date

    def is_settled_through(self, payday: date) -> bool:
        return self.last_paid_date is not None and self.last_paid_date >= payday

    def settle(self, payday: date, new_debt: Decimal) -> bool:
        """Record a union settlement. Returns False if already settled."""
        if self.is_settled_through(payday):
            return False
        self.prior_debt = self.accumulated_debt
        self.prior_paid_date = self.last_paid_date
        self.accumulated_debt = new_debt
        self.last_paid_date = payday
        return True


# ---------------------------------------------------------------------------
# Variant payloads
# ---------------------------------------------------------------------------


@dataclass
class HourlyTerms:
    hourly_rate: Decimal
    timecards: dict[date, TimeCard] = field(default_factory=dict)

    def clone(self) -> HourlyTerms:
        return replace(self, timecards=dict(self.timecards))

    def post(self, card: TimeCard) -> TimeCard | None:
        """Store a timecard, replacing any card on the same date."""
        previous = self.timecards.get(card.work_date)
        self.timecards[card.work_date] = card
        return previous

    def cards_between(self, start: date, end: date) -> list[TimeCard]:
        """Timecards dated within [start, end], in date order."""
        return [
            self.timecards[d]
            for d in sorted(self.timecards)
            if start <= d <= end
        ]

    @property
    def first_card_date(self) -> date | None:
        return min(self.timecards) if self.timecards else None


@dataclass
class SalariedTerms:
    monthly_salary: Decimal

    def clone(self) -> SalariedTerms:
        return replace(self)


@dataclass
class CommissionedTerms:
    monthly_salary: Decimal
    commission_rate: Decimal
    sales: list[SalesReceipt] = field(default_factory=list)

    def clone(self) -> CommissionedTerms:
        return replace(self, sales=list(self.sales))

    def remove_sale(self, receipt_id: UUID) -> SalesReceipt | None:
        for i, receipt in enumerate(self.sales):
            if receipt.receipt_id == receipt_id:
                return self.sales.pop(i)
        return None

    def sales_between(self, start: date, end: date) -> Decimal:
        """Sum of sales dated within [start, end]."""
        return sum(
            (s.amount for s in self.sales if start <= s.sale_date <= end),
            ZERO,
        )


PayTerms = HourlyTerms | SalariedTerms | CommissionedTerms

_TERMS_BY_KIND: dict[EmployeeKind, type] = {
    EmployeeKind.HOURLY: HourlyTerms,
    EmployeeKind.SALARIED: SalariedTerms,
    EmployeeKind.COMMISSIONED: CommissionedTerms,
}


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------


@dataclass
class Employee:
    """An employee record in the payroll arena, addressed by ``id``."""

    id: int
    name: str
    address: str
    kind: EmployeeKind
    terms: PayTerms
    schedule: str
    payment_method: PaymentMethod = PaymentMethod.CASH
    bank_account: BankAccount | None = None
    union: UnionMembership | None = None

    def __post_init__(self) -> None:
        expected = _TERMS_BY_KIND[self.kind]
        if not isinstance(self.terms, expected):
            raise TypeError(
                f"{self.kind.name} employee requires {expected.__name__}, "
                f"got {type(self.terms).__name__}"
            )
        if self.payment_method is PaymentMethod.BANK and self.bank_account is None:
            raise ValueError("Bank payment requires bank account details")

    def clone(self) -> Employee:
        return replace(
            self,
            terms=self.terms.clone(),
            union=self.union.clone() if self.union is not None else None,
        )

    @property
    def is_union_member(self) -> bool:
        return self.union is not None

    @property
    def base_rate(self) -> Decimal:
        """Hourly rate for hourly employees, monthly salary otherwise."""
        if isinstance(self.terms, HourlyTerms):
            return self.terms.hourly_rate
        return self.terms.monthly_salary

    def hire_reference(self, fallback: date) -> date:
        """Anchor for N-weekly schedules: first timecard date for hourly."""
        if isinstance(self.terms, HourlyTerms):
            first = self.terms.first_card_date
            if first is not None:
                return first
        return fallback

    def payment_description(self) -> str:
        if self.payment_method is PaymentMethod.BANK and self.bank_account is not None:
            acct = self.bank_account
            return f"{acct.bank}, Ag. {acct.branch} CC {acct.account}"
        if self.payment_method is PaymentMethod.MAIL:
            return f"Correios, {self.address}"
        return "Em maos"


def period_days(start: date, end: date) -> int:
    """Number of days in the inclusive range [start, end] (0 if empty)."""
    return max((end - start).days + 1, 0)
