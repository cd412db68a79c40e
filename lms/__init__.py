"""Library Management System - core package

This package contains the library inventory and circulation modules:
- Book and student records (book.py, student.py)
- Flat-file persistence (storage.py)
- Catalog, registry and circulation ledger (catalog.py, registry.py, circulation.py)
- CLI interface (main.py)
"""

__version__ = "1.0.0"
