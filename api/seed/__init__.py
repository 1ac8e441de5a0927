"""
Bootstrap data loader for the dashboard database.

Creates the `users`, `customers`, `invoices` and `revenue` tables when they are
missing and fills them with the placeholder dataset in one transaction.
"""
