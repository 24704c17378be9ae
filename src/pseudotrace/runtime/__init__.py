"""
Trace generation: symbol table, evaluator, executor and frame emission.
"""
