"""
Instance and Solution I/O

Reads problem instances in the challenge text format and writes/reads
solution files.

Instance format:
    nOrders nItems nAisles
    k item qty item qty ...      (one line per order)
    k item qty item qty ...      (one line per aisle)
    LB UB

Solution format:
    number of selected orders, then one order id per line,
    number of visited aisles, then one aisle id per line.
"""

from pathlib import Path
from typing import Dict, List, Union

from .wave_selection import WaveInstance, Candidate


class InstanceFormatError(ValueError):
    """Raised when an instance or solution file is malformed"""
    pass


def _parse_pairs(parts: List[str], n_items: int, line_no: int) -> Dict[int, int]:
    """Parse 'k item qty item qty ...' into a mapping"""
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise InstanceFormatError(f"Line {line_no}: non-integer token")

    if not values:
        raise InstanceFormatError(f"Line {line_no}: empty line")

    count = values[0]
    if count < 0 or len(values) != 1 + 2 * count:
        raise InstanceFormatError(
            f"Line {line_no}: expected {count} item/quantity pairs, got {len(values) - 1} values"
        )

    mapping = {}
    for j in range(count):
        item = values[1 + 2 * j]
        quantity = values[2 + 2 * j]
        if not 0 <= item < n_items:
            raise InstanceFormatError(f"Line {line_no}: item {item} out of range [0, {n_items})")
        if quantity < 0:
            raise InstanceFormatError(f"Line {line_no}: negative quantity {quantity} for item {item}")
        mapping[item] = mapping.get(item, 0) + quantity
    return mapping


def parse_instance(lines: List[str], name: str = None) -> WaveInstance:
    """
    Parse instance lines into a WaveInstance

    Raises:
        InstanceFormatError: If the content does not follow the format
    """
    content = [(i + 1, line.split()) for i, line in enumerate(lines) if line.strip()]
    if not content:
        raise InstanceFormatError("Instance is empty")

    line_no, header = content[0]
    if len(header) != 3:
        raise InstanceFormatError(f"Line {line_no}: header must be 'nOrders nItems nAisles'")
    try:
        n_orders, n_items, n_aisles = (int(h) for h in header)
    except ValueError:
        raise InstanceFormatError(f"Line {line_no}: non-integer header")

    expected = 1 + n_orders + n_aisles + 1
    if len(content) < expected:
        raise InstanceFormatError(
            f"Expected {expected} non-empty lines, found {len(content)}"
        )

    orders = [_parse_pairs(parts, n_items, no) for no, parts in content[1:1 + n_orders]]
    aisles = [_parse_pairs(parts, n_items, no)
              for no, parts in content[1 + n_orders:1 + n_orders + n_aisles]]

    line_no, bounds = content[1 + n_orders + n_aisles]
    if len(bounds) != 2:
        raise InstanceFormatError(f"Line {line_no}: wave bounds must be 'LB UB'")
    try:
        wave_size_lb, wave_size_ub = (int(b) for b in bounds)
    except ValueError:
        raise InstanceFormatError(f"Line {line_no}: non-integer wave bounds")
    if wave_size_lb < 0 or wave_size_lb > wave_size_ub:
        raise InstanceFormatError(
            f"Line {line_no}: invalid wave bounds LB={wave_size_lb}, UB={wave_size_ub}"
        )

    return WaveInstance(
        orders=orders,
        aisles=aisles,
        n_items=n_items,
        wave_size_lb=wave_size_lb,
        wave_size_ub=wave_size_ub,
        name=name
    )


def read_instance(path: Union[str, Path]) -> WaveInstance:
    """
    Load an instance file

    Raises:
        FileNotFoundError: If the file doesn't exist
        InstanceFormatError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Instance file not found: {path}")

    with open(path, 'r') as f:
        lines = f.readlines()

    return parse_instance(lines, name=path.stem)


def format_instance(instance: WaveInstance) -> str:
    """Serialize an instance back to the text format"""
    lines = [f"{instance.n_orders} {instance.n_items} {instance.n_aisles}"]
    for mapping in list(instance.orders) + list(instance.aisles):
        pairs = " ".join(f"{item} {qty}" for item, qty in mapping.items())
        lines.append(f"{len(mapping)} {pairs}".rstrip())
    lines.append(f"{instance.wave_size_lb} {instance.wave_size_ub}")
    return "\n".join(lines) + "\n"


def write_solution(candidate: Candidate,
                   output_path: Union[str, Path],
                   overwrite: bool = True) -> Path:
    """
    Write a candidate to a solution file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)
    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write(f"{len(candidate.orders)}\n")
        for order_id in sorted(candidate.orders):
            f.write(f"{order_id}\n")
        f.write(f"{len(candidate.aisles)}\n")
        for aisle_id in sorted(candidate.aisles):
            f.write(f"{aisle_id}\n")

    return output_path


def read_solution(path: Union[str, Path]) -> Candidate:
    """
    Load a solution file into a Candidate

    Raises:
        FileNotFoundError: If the file doesn't exist
        InstanceFormatError: If the file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Solution file not found: {path}")

    with open(path, 'r') as f:
        tokens = f.read().split()

    try:
        values = [int(t) for t in tokens]
    except ValueError:
        raise InstanceFormatError(f"Non-integer token in solution file {path}")

    if not values:
        raise InstanceFormatError(f"Solution file {path} is empty")

    n_orders = values[0]
    if len(values) < n_orders + 2:
        raise InstanceFormatError(f"Solution file {path} is truncated")
    orders = values[1:1 + n_orders]
    n_aisles = values[1 + n_orders]
    aisles = values[2 + n_orders:2 + n_orders + n_aisles]
    if len(aisles) != n_aisles or len(values) != 2 + n_orders + n_aisles:
        raise InstanceFormatError(f"Solution file {path} has inconsistent counts")

    return Candidate(orders=set(orders), aisles=set(aisles))
