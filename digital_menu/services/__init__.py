"""Data-access layer and menu business rules"""
