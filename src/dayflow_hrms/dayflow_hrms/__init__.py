"""DayFlow HRMS package.

Organized by feature modules (salary, attendance, leaves, employees) with a
thin Flask controller layer over service/repository layers.
"""
