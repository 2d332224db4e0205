"""Authentication module"""
