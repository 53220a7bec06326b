"""
Attendance and organizational-governance API.

Companies, their users and members, daily attendance, announcements,
discipline cases, permission requests and ideas, served by FastAPI over
either Postgres or an in-memory store.
"""
