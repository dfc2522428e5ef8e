"""CRM application for the clinic backend.

This package contains the payee models, the monthly carry-forward ledger
service and the REST routes that expose them to the front-end.
"""
