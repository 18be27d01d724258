"""API endpoint routers"""
