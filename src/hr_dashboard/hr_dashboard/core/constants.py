"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7

MIN_PAYROLL_YEAR = 2020
MAX_PAYROLL_YEAR = 2030
MAX_NOTES_LENGTH = 500

MAX_BASIC_SALARY = 1_000_000
EMPLOYEE_CODE_MAX_LENGTH = 20
RECENT_JOIN_DAYS = 30

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

MIN_PASSWORD_LENGTH = 8

# Column limits: DECIMAL(12,2) for money, DECIMAL(8,2) for overtime hours.
MAX_SALARY_AMOUNT = Decimal("9999999999.99")
MAX_OVERTIME_HOURS = Decimal("999999.99")
