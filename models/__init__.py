#!/usr/bin/env python3
"""Creates the unique DBStorage instance shared by the application."""
from models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
