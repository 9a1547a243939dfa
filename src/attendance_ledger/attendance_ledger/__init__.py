"""Attendance Ledger package.

This package is organized by feature modules (accounts, attendance, ledger)
with a thin Flask controller layer over the AttendanceLedger service and its
storage backends.
"""
