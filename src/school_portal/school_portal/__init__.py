"""School portal (SiAP) package.

Organized by feature modules (users, attendance, reminders, access, ...) with a thin
Flask controller layer over service and repository layers. The daily attendance
reminder and the route access rules are the two units with real logic.
"""
