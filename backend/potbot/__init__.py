"""
Potbot Backend
==============

This is the Python package for the Potbot plant-monitor API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a plant log look like?)
- services/  = Workers (command queue, credential checks, database, email)
- routers/   = API endpoints (the doors into our app)
- config.py  = Settings from environment variables
- db.py      = Database tables
- main.py    = Puts it all together and starts the server
"""

__version__ = "1.0.0"
