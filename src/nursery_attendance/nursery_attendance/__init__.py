"""Nursery Attendance package.

This package is organized by feature modules (children, groups, scans,
attendance, compliance, reports) with a thin Flask controller layer and
service/repository layers underneath.
"""
