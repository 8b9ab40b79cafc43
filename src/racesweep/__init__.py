"""racesweep -- benchmark-sweep orchestrator for Merkle/Verkle trees."""

import logging

__version__ = "0.1.0"

# Records are dropped unless --log-file installs a handler
logging.getLogger("racesweep").addHandler(logging.NullHandler())
