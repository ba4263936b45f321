"""
template_tokens utilities package
"""

from .io_utils import read_source_file, is_template_path, iter_template_files

__all__ = ["read_source_file", "is_template_path", "iter_template_files"]
