"""
Main seed runner script.
This script runs all seeding operations in the correct order.
"""

from .automation_rule_seed import seed_automation_rules
from .sample_data_seed import seed_sample_data


def run_all_seeds():
    """Run all seed operations."""
    print("=" * 60)
    print("STARTING ALL SEEDING OPERATIONS")
    print("=" * 60)
    print()

    seed_automation_rules()
    seed_sample_data()

    print()
    print("=" * 60)
    print("ALL SEEDING OPERATIONS COMPLETED")
    print("=" * 60)


if __name__ == "__main__":
    run_all_seeds()
