"""
Wave Metrics and Reporting System

Feasibility check and ratio objective for candidate waves, plus a
human-readable audit report of a finished wave.
"""

from typing import Dict, List, Tuple, Any

import numpy as np

from .wave_selection import WaveInstance, Candidate


def _item_totals(mappings: List[Dict[int, int]], indices, n_items: int) -> np.ndarray:
    """Sum item quantities of the selected mappings into a dense array"""
    totals = np.zeros(n_items, dtype=np.int64)
    for idx in indices:
        for item, quantity in mappings[idx].items():
            totals[item] += quantity
    return totals


def is_feasible(instance: WaveInstance, candidate: Candidate) -> bool:
    """
    Check wave bounds and per-item stock of a candidate

    Empty order or aisle sets are never feasible.
    """
    if candidate is None or not candidate.orders or not candidate.aisles:
        return False

    picked = _item_totals(instance.orders, candidate.orders, instance.n_items)
    available = _item_totals(instance.aisles, candidate.aisles, instance.n_items)

    total_units = int(picked.sum())
    if total_units < instance.wave_size_lb or total_units > instance.wave_size_ub:
        return False

    return bool(np.all(picked <= available))


def objective(instance: WaveInstance, candidate: Candidate) -> float:
    """Picked units per visited aisle (0.0 for an empty candidate)"""
    if candidate is None or not candidate.orders or not candidate.aisles:
        return 0.0

    total_units = instance.total_units(candidate.orders)
    return total_units / len(candidate.aisles)


def verify_candidate(instance: WaveInstance, candidate: Candidate) -> Tuple[bool, str, Dict[str, Any]]:
    """
    Audit a candidate and explain the first violated constraint

    Returns:
        tuple: (is_valid, message, statistics)
    """
    if candidate is None or not candidate.orders:
        return False, "No orders selected", {}
    if not candidate.aisles:
        return False, "No aisles visited", {}

    bad_orders = [o for o in candidate.orders if not 0 <= o < instance.n_orders]
    if bad_orders:
        return False, f"Unknown order ids: {sorted(bad_orders)[:10]}", {}
    bad_aisles = [a for a in candidate.aisles if not 0 <= a < instance.n_aisles]
    if bad_aisles:
        return False, f"Unknown aisle ids: {sorted(bad_aisles)[:10]}", {}

    picked = _item_totals(instance.orders, candidate.orders, instance.n_items)
    available = _item_totals(instance.aisles, candidate.aisles, instance.n_items)
    total_units = int(picked.sum())

    if total_units < instance.wave_size_lb:
        return False, f"Total units {total_units} < lower bound {instance.wave_size_lb}", {}
    if total_units > instance.wave_size_ub:
        return False, f"Total units {total_units} > upper bound {instance.wave_size_ub}", {}

    shortages = np.flatnonzero(picked > available)
    if shortages.size > 0:
        item = int(shortages[0])
        return False, (
            f"Item {item}: demand {int(picked[item])} > stock {int(available[item])} "
            f"({shortages.size} items short)"
        ), {}

    stats = {
        'num_selected_orders': len(candidate.orders),
        'num_visited_aisles': len(candidate.aisles),
        'total_units': total_units,
        'objective': total_units / len(candidate.aisles),
        'wave_window': f"[{instance.wave_size_lb}, {instance.wave_size_ub}]",
        'items_checked': int(np.count_nonzero(picked)),
    }
    return True, "Valid wave - all constraints satisfied", stats


class WaveMetrics:
    """Metrics calculator for wave quality assessment"""

    def __init__(self, instance: WaveInstance):
        self.instance = instance

    def analyze(self, candidate: Candidate) -> Dict[str, Any]:
        """
        Comprehensive analysis of a candidate wave

        Returns:
            Dictionary containing feasibility, objective, wave fill and
            per-aisle utilisation
        """
        valid, message, _ = verify_candidate(self.instance, candidate)
        metrics = {
            'feasible': valid,
            'verification_message': message,
            'objective': objective(self.instance, candidate),
            'num_orders': len(candidate.orders),
            'num_aisles': len(candidate.aisles),
            'total_units': 0,
            'wave_fill': 0.0,
            'aisle_utilization': {},
            'unused_aisles': [],
        }
        if candidate.is_empty:
            return metrics

        total_units = self.instance.total_units(candidate.orders)
        metrics['total_units'] = total_units
        if self.instance.wave_size_ub > 0:
            metrics['wave_fill'] = total_units / self.instance.wave_size_ub

        metrics['aisle_utilization'] = self._aisle_utilization(candidate)
        metrics['unused_aisles'] = sorted(
            a for a, share in metrics['aisle_utilization'].items() if share == 0.0
        )
        return metrics

    def _aisle_utilization(self, candidate: Candidate) -> Dict[int, float]:
        """
        Share of each visited aisle's stock that the wave could draw on

        Demand for an item is spread over its visited aisles in ascending
        aisle order.
        """
        remaining = {}
        for order_id in candidate.orders:
            for item, quantity in self.instance.orders[order_id].items():
                remaining[item] = remaining.get(item, 0) + quantity

        utilization = {}
        for aisle_idx in sorted(candidate.aisles):
            stock = self.instance.aisles[aisle_idx]
            capacity = sum(stock.values())
            drawn = 0
            for item, quantity in stock.items():
                take = min(quantity, remaining.get(item, 0))
                if take > 0:
                    remaining[item] -= take
                    drawn += take
            utilization[aisle_idx] = drawn / capacity if capacity > 0 else 0.0

        return utilization


def print_wave_report(metrics: Dict[str, Any], detailed: bool = True) -> str:
    """Generate a human-readable wave quality report"""
    lines = []
    lines.append("=" * 60)
    lines.append("WAVE QUALITY REPORT")
    lines.append("=" * 60)
    lines.append(f"Objective (units / aisle): {metrics['objective']:.4f}")
    lines.append(f"Orders selected: {metrics['num_orders']}")
    lines.append(f"Aisles visited: {metrics['num_aisles']}")
    lines.append(f"Total units: {metrics['total_units']}")
    lines.append(f"Wave fill (of upper bound): {metrics['wave_fill']:.1%}")
    lines.append("")

    if detailed and metrics['aisle_utilization']:
        lines.append("AISLE UTILIZATION:")
        for aisle_idx, share in metrics['aisle_utilization'].items():
            lines.append(f"  aisle {aisle_idx}: {share:.3f}")
        lines.append("")

    if metrics['unused_aisles']:
        lines.append(f"Aisles visited without drawing stock: {metrics['unused_aisles']}")

    if metrics['feasible']:
        lines.append("FEASIBILITY: All constraints satisfied")
    else:
        lines.append(f"FEASIBILITY: {metrics['verification_message']}")

    lines.append("=" * 60)

    return "\n".join(lines)
