"""
Intermediate representation: node classes, JSON loader and S-expression dump.
"""
