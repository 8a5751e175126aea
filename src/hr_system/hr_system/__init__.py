"""HR administration core.

Organized by feature modules (accounts, employees, departments, attendance,
overtime, leaves, payroll, ...) with a thin Flask controller layer over
service/repository layers.
"""
