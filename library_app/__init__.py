"""Library App - Books API Package

This package contains the application modules:
- API endpoints (api.py)
- Book repository over MongoDB (library.py)
- CLI interface (main.py)
- Data models (book.py)
- Database connection bootstrap (database.py)
"""

__version__ = "1.0.0"
