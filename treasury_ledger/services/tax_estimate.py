"""
Rough self-employment tax estimate for the dashboard.

Not tax advice: a single 22% marginal bracket and the standard
self-employment rates, good enough to size quarterly payments.
"""

from decimal import Decimal, ROUND_HALF_UP

from treasury_ledger.schemas.ledger import TaxEstimate

SE_TAXABLE_SHARE = Decimal("0.9235")
SE_TAX_RATE = Decimal("0.153")
INCOME_TAX_RATE = Decimal("0.22")


def _cents(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), ROUND_HALF_UP))


def estimate_taxes(revenue_cents: int, expenses_cents: int) -> TaxEstimate:
    net = Decimal(revenue_cents - expenses_cents)

    se_tax = net * SE_TAXABLE_SHARE * SE_TAX_RATE if net > 0 else Decimal(0)
    # Half of SE tax is deductible
    taxable = net - se_tax / 2
    income_tax = taxable * INCOME_TAX_RATE if taxable > 0 else Decimal(0)
    total = se_tax + income_tax

    effective_rate = (
        float((total / Decimal(revenue_cents) * 100).quantize(Decimal("0.01")))
        if revenue_cents > 0 else 0.0
    )

    return TaxEstimate(
        gross_income_cents=revenue_cents,
        total_deductions_cents=expenses_cents,
        net_income_cents=revenue_cents - expenses_cents,
        self_employment_tax_cents=_cents(se_tax),
        estimated_income_tax_cents=_cents(income_tax),
        estimated_total_tax_cents=_cents(total),
        estimated_quarterly_payment_cents=_cents(total / 4),
        effective_rate=effective_rate,
    )
