"""Core infrastructure: settings, logging, database, metrics, templates"""
