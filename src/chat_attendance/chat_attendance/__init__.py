"""Chat attendance package.

Presence, leave requests and manager decisions driven entirely by chat
messages. Organized by feature modules (attendance, leave, reports, ...) with
a thin Flask controller layer on top of service/repository layers.
"""
