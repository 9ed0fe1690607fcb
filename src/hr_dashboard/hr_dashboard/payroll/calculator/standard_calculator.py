from __future__ import annotations

from ...common.money import round_money, to_decimal
from .base import PayrollCalculator, SalaryCalculation


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross = basic + bonus + allowances + overtime; net = gross - deductions.

    Inputs are not range-checked here; negative values flow through unchanged.
    """

    def calculate(
        self,
        basic_salary,
        *,
        bonus=0,
        deductions=0,
        allowances=0,
        overtime_hours=0,
        overtime_rate=0,
    ) -> SalaryCalculation:
        basic = to_decimal(basic_salary)
        bonus = to_decimal(bonus)
        deductions = to_decimal(deductions)
        allowances = to_decimal(allowances)
        hours = to_decimal(overtime_hours)
        rate = to_decimal(overtime_rate)

        # Stored at cents, so the stored total and a recomputed net agree.
        overtime_pay = round_money(hours * rate)
        gross = basic + bonus + allowances + overtime_pay
        return SalaryCalculation(
            basic_salary=basic,
            bonus=bonus,
            deductions=deductions,
            allowances=allowances,
            overtime_hours=hours,
            overtime_rate=rate,
            overtime_pay=overtime_pay,
            gross_salary=gross,
            total_deductions=deductions,
            net_salary=gross - deductions,
        )
