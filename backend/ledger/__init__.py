"""Inequality ledger backend package"""
