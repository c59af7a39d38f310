"""
Sales app: checkout, bills and invoices.
"""
