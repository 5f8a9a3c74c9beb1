"""
Architect: dynamic module loading over chained, restorable environments.

  get:      fetch <repository>/<path>.py, compile it, chain it to the ecosystem
  build:    adopt a configuration and pre-load every listed file
  revert:   put every designated global scope back the way it was at import
  classify: flatten bases into a callable prototype

| Layer                        | Purpose                                      |
<----------------------------- + -------------------------------------------->
| **Namespace chain**          | Reads fall through to a base, writes do not  |
| **Deep copier**              | Cycle-safe, identity-preserving clones       |
| **Snapshot / restore**       | Key-set reconciliation of global scopes      |
| **Module loader**            | Fetch → compile → bind environment → execute |
| **Operation log & logbook**  | Timestamped log, signed JSONL ledger         |
| **Visualization**            | NetworkX graph of environment chains         |
"""

from . import core as _core
from . import copier as _copier
from . import loader as _loader
from . import crypto as _crypto
from . import logbook as _logbook
from . import classes as _classes
from . import engine as _engine
from . import analysis as _analysis
from .cli import main, parse_args
from ..constants import KEY_FILE, LOGBOOK_FILE, PUB_FILE

from .core import *
from .copier import *
from .loader import *
from .crypto import *
from .logbook import *
from .classes import *
from .engine import *
from .analysis import *

# Imported last: the process snapshot must see the engine fully loaded.
from . import snapshot as _snapshot
from .snapshot import *

__all__ = []
for module in (_core, _copier, _loader, _crypto, _logbook, _classes, _engine, _analysis, _snapshot):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['main', 'parse_args', 'KEY_FILE', 'LOGBOOK_FILE', 'PUB_FILE']
__all__ = list(dict.fromkeys(__all__))
