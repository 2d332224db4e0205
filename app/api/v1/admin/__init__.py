"""Admin API router"""
