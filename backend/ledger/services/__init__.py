"""Reconciliation components and the persistence boundary"""
