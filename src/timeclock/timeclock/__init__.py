"""Time clock package.

Organized by feature modules (entries, workday, timebank, reports, absences, ...)
with a thin Flask controller layer on top of service/repository layers.
"""
