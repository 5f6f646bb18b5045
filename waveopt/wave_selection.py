"""
Wave Selection Core

Data model and stock-aware greedy constructor for the wave order picking
problem: choose a subset of orders and the aisles that supply them so that
picked units per visited aisle is maximized while the total units stay
inside the wave size window.
"""

import sys
from typing import List, Dict, Set, Optional, Iterable
from dataclasses import dataclass, field


@dataclass
class WaveInstance:
    """Problem instance: orders and aisles as item -> quantity mappings"""
    orders: List[Dict[int, int]]
    aisles: List[Dict[int, int]]
    n_items: Optional[int] = None
    wave_size_lb: int = 0
    wave_size_ub: int = 0
    name: Optional[str] = None
    order_units: List[int] = field(init=False, repr=False)

    def __post_init__(self):
        if self.n_items is None:
            max_item = -1
            for mapping in list(self.orders) + list(self.aisles):
                if mapping:
                    max_item = max(max_item, max(mapping))
            self.n_items = max_item + 1
        self.order_units = [sum(order.values()) for order in self.orders]

    @property
    def n_orders(self) -> int:
        return len(self.orders)

    @property
    def n_aisles(self) -> int:
        return len(self.aisles)

    def total_units(self, order_ids: Iterable[int]) -> int:
        """Total units required by the given orders"""
        return sum(self.order_units[o] for o in order_ids)


@dataclass
class Candidate:
    """A wave: selected order indices and visited aisle indices"""
    orders: Set[int] = field(default_factory=set)
    aisles: Set[int] = field(default_factory=set)

    @classmethod
    def empty(cls) -> 'Candidate':
        """Explicit 'no feasible wave found' candidate"""
        return cls(orders=set(), aisles=set())

    @property
    def is_empty(self) -> bool:
        return not self.orders or not self.aisles

    def copy(self) -> 'Candidate':
        return Candidate(orders=set(self.orders), aisles=set(self.aisles))


@dataclass
class OrderScore:
    """Density score of one order (units per required aisle)"""
    order_id: int
    units: int
    num_aisles: int
    score: float


@dataclass
class RunningAccumulators:
    """Incremental state of one greedy pass"""
    total_units: int = 0
    required: Dict[int, int] = field(default_factory=dict)
    committed_aisles: Set[int] = field(default_factory=set)
    available: Dict[int, int] = field(default_factory=dict)

    def commit(self,
               order: Dict[int, int],
               units: int,
               item_aisle_index: Dict[int, Set[int]],
               aisles: List[Dict[int, int]]) -> Set[int]:
        """
        Merge an accepted order into the running state

        Returns:
            Set of aisles committed by this order that were not committed before
        """
        self.total_units += units

        new_aisles = set()
        for item, quantity in order.items():
            self.required[item] = self.required.get(item, 0) + quantity
            for aisle_idx in item_aisle_index.get(item, ()):
                if aisle_idx not in self.committed_aisles:
                    new_aisles.add(aisle_idx)

        # Each aisle's stock is unlocked once, not once per item
        for aisle_idx in new_aisles:
            self.committed_aisles.add(aisle_idx)
            for item, quantity in aisles[aisle_idx].items():
                self.available[item] = self.available.get(item, 0) + quantity

        return new_aisles


@dataclass
class ConstructionStep:
    """Snapshot of the running state after an accepted order"""
    order_id: int
    total_units: int
    committed_aisles: frozenset
    available: Dict[int, int]


def build_item_aisle_index(aisles: List[Dict[int, int]]) -> Dict[int, Set[int]]:
    """Map every item to the set of aisles that stock it (quantity > 0)"""
    index: Dict[int, Set[int]] = {}
    for aisle_idx, stock in enumerate(aisles):
        for item, quantity in stock.items():
            if quantity > 0:
                index.setdefault(item, set()).add(aisle_idx)
    return index


def required_aisles(order: Dict[int, int], item_aisle_index: Dict[int, Set[int]]) -> Set[int]:
    """Union of the aisles stocking any item of the order"""
    result = set()
    for item in order:
        result.update(item_aisle_index.get(item, ()))
    return result


def score_orders(instance: WaveInstance,
                 item_aisle_index: Dict[int, Set[int]]) -> List[OrderScore]:
    """
    Rank orders by density score, best first

    Orders without units are dropped. Orders whose items are stocked nowhere
    get the maximum float as a sentinel score. Ties are broken by order index.
    """
    scores = []
    for order_id, order in enumerate(instance.orders):
        units = instance.order_units[order_id]
        if units == 0:
            continue

        num_aisles = len(required_aisles(order, item_aisle_index))
        score = units / num_aisles if num_aisles > 0 else sys.float_info.max
        scores.append(OrderScore(order_id, units, num_aisles, score))

    scores.sort(key=lambda s: (-s.score, s.order_id))
    return scores


class GreedyWaveConstructor:
    """
    Single-pass stock-aware greedy construction

    Walks the density ranking once, accepting every order that keeps the wave
    under the upper bound and whose items can be supplied by the committed
    aisles plus the aisles the order would open.
    """

    def __init__(self,
                 instance: WaveInstance,
                 item_aisle_index: Optional[Dict[int, Set[int]]] = None,
                 record_trace: bool = False):
        self.instance = instance
        self.item_aisle_index = (item_aisle_index if item_aisle_index is not None
                                 else build_item_aisle_index(instance.aisles))
        self.record_trace = record_trace

        self.accumulators = RunningAccumulators()
        self.trace: List[ConstructionStep] = []
        self.notes: List[str] = []
        self.rejected_bound = 0
        self.rejected_stock = 0

    def construct(self, budget=None) -> Candidate:
        """
        Build a wave in one pass over the ranked orders

        Args:
            budget: Optional TimeBudget polled once per order

        Returns:
            Candidate, or the empty candidate if the lower bound was not reached
        """
        self.accumulators = RunningAccumulators()
        self.trace = []
        self.notes = []
        self.rejected_bound = 0
        self.rejected_stock = 0

        ranking = score_orders(self.instance, self.item_aisle_index)
        state = self.accumulators
        selected: Set[int] = set()

        for order_score in ranking:
            if budget is not None and budget.expired():
                self.notes.append(
                    f"Time budget exhausted after {len(selected)} accepted orders"
                )
                break

            # A smaller order later in the ranking may still fit
            if state.total_units + order_score.units > self.instance.wave_size_ub:
                self.rejected_bound += 1
                continue

            order = self.instance.orders[order_score.order_id]
            if not self._order_fits(order):
                self.rejected_stock += 1
                continue

            selected.add(order_score.order_id)
            state.commit(order, order_score.units, self.item_aisle_index, self.instance.aisles)

            if self.record_trace:
                self.trace.append(ConstructionStep(
                    order_id=order_score.order_id,
                    total_units=state.total_units,
                    committed_aisles=frozenset(state.committed_aisles),
                    available=dict(state.available)
                ))

        if state.total_units < self.instance.wave_size_lb or not selected:
            self.notes.append(
                f"Greedy construction failed: {state.total_units} units "
                f"< lower bound {self.instance.wave_size_lb}"
                if selected else "Greedy construction failed: no order could be selected"
            )
            return Candidate.empty()

        self.notes.append(
            f"Greedy construction selected {len(selected)} orders, "
            f"{len(state.committed_aisles)} aisles, {state.total_units} units"
        )
        return Candidate(orders=selected, aisles=set(state.committed_aisles))

    def _order_fits(self, order: Dict[int, int]) -> bool:
        """Check stock feasibility of adding an order to the current wave"""
        state = self.accumulators

        for item, quantity in order.items():
            projected = state.required.get(item, 0) + quantity
            if projected <= state.available.get(item, 0):
                continue

            item_aisles = self.item_aisle_index.get(item, set())
            if item_aisles <= state.committed_aisles:
                # Nothing new to open for this item
                return False

            # Recompute stock for this item only, over the prospective aisle set
            prospective = state.committed_aisles | item_aisles
            full_stock = sum(self.instance.aisles[a].get(item, 0) for a in prospective)
            if projected > full_stock:
                return False

        return True
