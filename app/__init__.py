"""Bookstore API application package"""
