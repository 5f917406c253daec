"""Workshop Attendance package.

Feature modules (attendance, breaks, broadcasts, scheduler) on top of a
shared, failure-tolerant MySQL data access layer. Business rules live in the
service layer; repositories only translate rows.
"""
