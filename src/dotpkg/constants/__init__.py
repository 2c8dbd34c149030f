"""Generation constants.

Re-exports all constants for convenient importing:
    from dotpkg.constants import DATA_DIR, AUTOGENERATED_NOTE
"""

from dotpkg.constants.generation import *  # noqa: F403
