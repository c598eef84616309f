"""Lesson Payroll package.

Feature modules (teachers, lessons, settings, obligations, payroll) with a thin
Flask controller layer over service/repository layers. Teacher obligation
status and monthly salary deductions are derived from per-lesson completion
flags.
"""
