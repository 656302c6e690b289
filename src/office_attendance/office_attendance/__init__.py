"""Office attendance package.

Feature modules (attendance, shifts, hours, employees, reports) with a thin
Flask controller layer on top of service/repository layers.
"""
