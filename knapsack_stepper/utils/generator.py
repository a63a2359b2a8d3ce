# knapsack_stepper/utils/generator.py
# -*- coding: utf-8 -*-


'''
This module provides functions to generate random knapsack instances and to
read/write them as small CSV files that the stepping tools can replay.
'''

import random
from typing import List, Optional, Tuple
import os
import csv
import logging
logger = logging.getLogger(__name__)

CORRELATION_TYPES = ('uncorrelated', 'weakly_correlated', 'strongly_correlated', 'subset_sum')

# (name, value, weight)
InstanceItem = Tuple[str, int, int]


def _item_name(index: int) -> str:
    """Spreadsheet-style labels: A, B, ..., Z, AA, AB, ..."""
    name = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        name = chr(ord('A') + rem) + name
    return name


# Function to generate a knapsack instance with one constraint
def generate_knapsack_instance(
    n: int,
    correlation: str = 'uncorrelated',
    max_weight: int = 10,
    max_value: int = 30,
    capacity_ratio: float = 0.5,
    rng: Optional[random.Random] = None
) -> Tuple[List[InstanceItem], int]:

    """
    Generate a small instance of the 0/1 knapsack problem.

    Args:
        n (int): Number of items to generate (0 is allowed).
        correlation (str): Type of correlation between item values and weights.
            Options: 'uncorrelated', 'weakly_correlated',
                    'strongly_correlated', 'subset_sum'.
        max_weight (int): Maximum weight for a single item.
        max_value (int): Maximum value for a single item (used when uncorrelated).
        capacity_ratio (float): Ratio of knapsack capacity to the total weight of all items (between 0.0 and 1.0).
        rng (random.Random): Optional seeded generator for reproducible suites.

    Returns:
        Tuple[List[Tuple[str, int, int]], int]:
            - A list of items, each represented as a tuple (name, value, weight).
            - The computed knapsack capacity.
    """

    if correlation not in CORRELATION_TYPES:
        raise ValueError("Correlation type must be one of 'uncorrelated', 'weakly_correlated', 'strongly_correlated', or 'subset_sum'")
    if not (0.0 < capacity_ratio <= 1.0):
        raise ValueError("Capacity ratio must be between 0.0 and 1.0")

    rng = rng or random.Random()
    items = []
    total_weight = 0

    for i in range(n):
        weight = rng.randint(1, max_weight)
        value = 0

        if correlation == 'uncorrelated':
            value = rng.randint(1, max_value)
        elif correlation == 'weakly_correlated':
            # Noise of about 25% of the maximum value
            noise = int(max_value / 4)
            value = max(1, weight + rng.randint(-noise, noise))
        elif correlation == 'strongly_correlated':
            # Noise of about 10% of the maximum value
            noise = int(max_value / 10)
            value = max(1, weight + rng.randint(-noise, noise))
        elif correlation == 'subset_sum':
            value = weight

        items.append((_item_name(i), value, weight))
        total_weight += weight

    capacity = int(total_weight * capacity_ratio)

    return items, capacity


def save_instance_to_file(items: List[InstanceItem], capacity: int, filename: str):
    """Saves an instance to a csv file."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filename, 'w', newline='') as f:
        # First line: number of items and capacity
        f.write(f"{len(items)} {capacity}\n")
        writer = csv.writer(f)
        writer.writerow(['name', 'value', 'weight'])
        for name, value, weight in items:
            writer.writerow([name, value, weight])

    logger.info(f"Instance successfully saved to {filename}")


def load_instance_from_file(filename: str) -> Tuple[List[InstanceItem], int]:
    """
    Loads a knapsack instance from a csv file.

    The first line is 'num_items capacity', followed by a header row and one
    row per item. Both 'name,value,weight' and the older 'value,weight'
    layouts are accepted; unnamed items get spreadsheet-style names.

    Returns:
        Tuple[List[Tuple[str, int, int]], int]: (items, capacity)
    """
    if not os.path.exists(filename):
        raise FileNotFoundError(f"Instance file not found at: {filename}")

    items = []
    with open(filename, 'r', newline='') as f:
        # 1. Meta-data from the first line
        meta_line = f.readline().strip()
        try:
            num_items_str, capacity_str = meta_line.split()
            capacity = int(capacity_str)
            expected_num_items = int(num_items_str)
        except ValueError as e:
            raise ValueError(f"Malformed header line in '{filename}': {meta_line!r}") from e

        reader = csv.reader(f)

        # 2. Column layout from the header row
        try:
            header = [col.strip().lower() for col in next(reader)]
        except StopIteration:
            logger.warning(f"File '{filename}' contains no header or data rows.")
            header = ['name', 'value', 'weight']
        has_names = 'name' in header

        # 3. Data rows
        for row in reader:
            if not row:
                continue
            if has_names:
                name, value, weight = row[0], int(row[1]), int(row[2])
            else:
                name, value, weight = _item_name(len(items)), int(row[0]), int(row[1])
            items.append((name, value, weight))

    # 4. Check the declared count against what was read
    if len(items) != expected_num_items:
        logger.warning(f"Inconsistent data in '{filename}'. "
                       f"Header specified {expected_num_items} items, but file contained {len(items)} items.")

    logger.info(f"Instance successfully loaded from {filename} ({len(items)} items).")
    return items, capacity
