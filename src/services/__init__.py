"""
Marketplace services: payments, deposits and admin reports.
"""
