"""
Language and grammar rules.
"""
