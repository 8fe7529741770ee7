"""
Contract models shared by services and routes
"""
