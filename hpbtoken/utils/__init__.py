"""
This package contains helper functionality.

==========
Submodules
==========
* :py:mod:`.helpers`: Miscellaneous operations (file reading, contract name extraction, ...)
* :py:mod:`.progress_printer`: Context managers for colored terminal output.
* :py:mod:`.timer`: Context manager for measuring elapsed (wall clock) time
"""
