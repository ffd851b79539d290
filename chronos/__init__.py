"""Chronos focus timer backend"""
