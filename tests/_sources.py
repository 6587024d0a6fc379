from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

WriteSource = Callable[[str, str], Path]

DUPLICATED_RUST = """\
fn calculate_sum(numbers: &[i32]) -> i32 {
    let mut sum = 0;
    for num in numbers {
        sum += num;
    }
    sum
}

fn calculate_average(numbers: &[i32]) -> f64 {
    let sum = calculate_sum(numbers);
    let count = numbers.len();
    if count == 0 {
        return 0.0;
    }
    sum as f64 / count as f64
}

fn main() {
    let numbers = vec![1, 2, 3, 4, 5, 6, 7, 8, 9, 10];
    let sum = calculate_sum(&numbers);
    println!("Sum: {}", sum);
}
"""

DISTINCT_PYTHON = """\
class Inventory:
    def __init__(self):
        self.items = {}

    def restock(self, name, amount):
        current = self.items.get(name)
        self.items[name] = amount if current is None else current + amount
"""

COMMENTS_ONLY = """
// This is a file with only comments
// No actual code here
/*
 * Multi-line comment
 * Also no code
 */
"""
