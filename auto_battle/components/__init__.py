"""auto_battle.components
=======================

Import surface for the value objects that enter a battle from the outside.
They carry no behavior; the resolver reads them once at battle start::

    from auto_battle.components import Combatant
"""

from .combatant import Combatant

__all__ = [
    "Combatant",
]
