"""Resource ledger.

Prices pieces from a :class:`~settlers.models.player.CostTable`, takes
payment, hands out pieces from each player's inventory and credits
production.  The bank's own resource supply is unlimited.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import player
from . import production

logger = logging.getLogger(__name__)


class BankError(ValueError):
    """Base class for failed bank transactions."""


class InsufficientResourcesError(BankError):
    """The player cannot pay for the piece."""


class NoPiecesLeftError(BankError):
    """The player has none of the piece left to place."""


class Bank:
    """Applies costs and production to :class:`~settlers.models.player.Player` objects.

    Players are updated in place; callers pass players from a state they own.
    """

    def __init__(self, costs: player.CostTable = player.STANDARD_COSTS) -> None:
        self._costs = costs

    def cost_of(self, piece: player.PieceType) -> player.Resources:
        """Return the price of *piece*."""
        return self._costs.cost_of(piece)

    def can_afford(self, p: player.Player, piece: player.PieceType) -> bool:
        """Return True if *p* can pay for *piece* and still has one to place."""
        return (
            p.build_inventory.remaining(piece) > 0
            and p.resources.can_afford(self.cost_of(piece))
        )

    def charge(self, p: player.Player, piece: player.PieceType) -> None:
        """Deduct the cost of *piece* and take one from the inventory.

        Raises:
            NoPiecesLeftError: If no piece of this type remains.
            InsufficientResourcesError: If *p* cannot pay.
        """
        cost = self.cost_of(piece)
        if not p.resources.can_afford(cost):
            raise InsufficientResourcesError(
                f'{p.name} cannot afford a {piece}: has {p.resources.model_dump()}'
            )
        self.take_piece(p, piece)
        p.resources = p.resources.subtract(cost)

    def take_piece(self, p: player.Player, piece: player.PieceType) -> None:
        """Take one *piece* from the inventory without payment (setup placements).

        Raises:
            NoPiecesLeftError: If no piece of this type remains.
        """
        left = p.build_inventory.remaining(piece)
        if left < 1:
            raise NoPiecesLeftError(f'{p.name} has no {piece} pieces left')
        p.build_inventory = p.build_inventory.with_remaining(piece, left - 1)

    def return_piece(self, p: player.Player, piece: player.PieceType) -> None:
        """Put one *piece* back, e.g. the settlement replaced by a city."""
        left = p.build_inventory.remaining(piece)
        p.build_inventory = p.build_inventory.with_remaining(piece, left + 1)

    def credit(
        self, players: list[player.Player], events: Iterable[production.Production]
    ) -> None:
        """Add production events to the owning players' hands."""
        for index, gained in production.summarize(events).items():
            p = players[index]
            p.resources = p.resources.add(gained)
            logger.debug('%s received %s', p.name, gained.model_dump())
