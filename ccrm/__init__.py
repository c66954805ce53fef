"""
CCRM: Campus Course & Records Manager

Manages students, courses, enrollments and grades for a campus, with
per-semester credit limits, GPA reporting, CSV persistence and backups.
"""

__version__ = "1.0.0"
__author__ = "CCRM Development Team"
__description__ = "Campus Course & Records Manager"
