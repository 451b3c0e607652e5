"""
Code quality and reliability rules.
"""
