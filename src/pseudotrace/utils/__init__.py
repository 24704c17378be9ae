"""
pseudotrace utilities package
"""

from .io_utils import read_source_file, read_ir_document

__all__ = ["read_source_file", "read_ir_document"]
