"""HR Dashboard package.

This package is organized by feature modules (accounts, employees, payroll, projects)
with a thin Flask controller layer and service/repository layers underneath.
"""
