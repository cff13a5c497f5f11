"""Default file locations.

The database file lives relative to the process's working directory unless a
path is passed explicitly or set in the configuration.
"""

from pathlib import Path

DATABASE_NAME = "__FORZENDB__.db"

DATABASE_PATH = Path(".") / DATABASE_NAME
