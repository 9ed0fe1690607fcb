"""Example: drive the payroll actions directly (no Flask).

Controllers are a thin layer; everything below is what the HTTP routes call.
"""

import importlib

from config import get_settings_module

from src.hr_dashboard.hr_dashboard.common.datetime_utils import current_period
from src.hr_dashboard.hr_dashboard.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    account = container.auth_service.authenticate("admin@blurr.so", "12345678")
    month, year = current_period()

    report = container.payroll_actions.generate_monthly_report(account.account_id, month=month, year=year)
    if not report.success:
        raise SystemExit(report.error)
    print(f"{report.data.new_records_count} new records for {month:02d}/{year}")

    stats = container.payroll_actions.get_dashboard_stats(account.account_id)
    print(stats.data)


if __name__ == "__main__":
    main()
