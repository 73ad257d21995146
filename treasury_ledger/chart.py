"""
Chart of accounts and expense categories.

The account set is closed: the ledger only ever posts to the accounts
defined here, and they are created on first use.
"""

from typing import NamedTuple

from treasury_ledger.models.enums import AccountType, ExpenseCategory

CASH_ON_HAND = "CASH_ON_HAND"
BANK_FULTON = "BANK_FULTON"
KRAKEN_PENDING = "KRAKEN_PENDING"
KRAKEN = "KRAKEN"
OWNER_EQUITY = "OWNER_EQUITY"
REVENUE = "REVENUE"
EXPENSE_PREFIX = "EXPENSE:"


class AccountDefinition(NamedTuple):
    id: str
    name: str
    account_type: AccountType
    institution: str = "Internal"
    is_external: bool = False


class CategoryInfo(NamedTuple):
    name: str
    schedule_c: int
    description: str


# IRS Schedule C line numbers
EXPENSE_CATEGORIES: dict[ExpenseCategory, CategoryInfo] = {
    ExpenseCategory.HOME_OFFICE: CategoryInfo(
        "Home Office", 30, "Rent, utilities, insurance (% of home used)"),
    ExpenseCategory.EQUIPMENT: CategoryInfo(
        "Equipment & Supplies", 22, "Computer, monitors, desk, chair, etc."),
    ExpenseCategory.SOFTWARE: CategoryInfo(
        "Software & Subscriptions", 22, "SaaS, tools, hosting, domains"),
    ExpenseCategory.INTERNET: CategoryInfo(
        "Internet & Phone", 25, "Business % of internet, phone plan"),
    ExpenseCategory.EDUCATION: CategoryInfo(
        "Education & Training", 27, "Courses, books, certifications"),
    ExpenseCategory.TRAVEL: CategoryInfo(
        "Travel", 24, "Business travel, mileage"),
    ExpenseCategory.MEALS: CategoryInfo(
        "Meals (50%)", 24, "Business meals with clients (50% deductible)"),
    ExpenseCategory.PROFESSIONAL: CategoryInfo(
        "Professional Services", 17, "Legal, accounting, consulting"),
    ExpenseCategory.INSURANCE: CategoryInfo(
        "Business Insurance", 15, "Liability, E&O insurance"),
    ExpenseCategory.BANK_FEES: CategoryInfo(
        "Bank & Payment Fees", 27, "Bank fees, Stripe fees, etc."),
    ExpenseCategory.MARKETING: CategoryInfo(
        "Marketing & Advertising", 8, "Ads, promotions, branding"),
    ExpenseCategory.OTHER: CategoryInfo(
        "Other Expenses", 27, "Miscellaneous business expenses"),
}


def expense_account_id(category: ExpenseCategory) -> str:
    return f"{EXPENSE_PREFIX}{category.name}"


CHART_OF_ACCOUNTS: list[AccountDefinition] = [
    AccountDefinition(CASH_ON_HAND, "Cash on Hand", AccountType.ASSET,
                      institution="Physical Cash"),
    AccountDefinition(BANK_FULTON, "Fulton Business Checking", AccountType.ASSET,
                      institution="Fulton Bank"),
    AccountDefinition(KRAKEN_PENDING, "Kraken (in transit)", AccountType.ASSET,
                      institution="Kraken (Payward Inc)"),
    AccountDefinition(KRAKEN, "Kraken Trading", AccountType.ASSET,
                      institution="Kraken (Payward Inc)", is_external=True),
    AccountDefinition(OWNER_EQUITY, "Owner Equity", AccountType.EQUITY),
    AccountDefinition(REVENUE, "Revenue", AccountType.REVENUE),
] + [
    AccountDefinition(expense_account_id(category), f"Expense: {info.name}",
                      AccountType.EXPENSE)
    for category, info in EXPENSE_CATEGORIES.items()
]
