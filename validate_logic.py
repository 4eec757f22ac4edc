#!/usr/bin/env python3
"""
Comprehensive logical validation of simulation results.
Checks data integrity, business logic, and cross-file consistency.
"""

import pandas as pd
import sys
from pathlib import Path

from core.models import DEFAULT_ROOM_TYPES


def _rank(name: str) -> int:
    return DEFAULT_ROOM_TYPES.get(name).rank


def validate_simulation_logic(results_dir: str = 'simulation_results/smart') -> int:
    """Run all validation checks; returns a process exit code."""

    print('='*70)
    print('LOGICAL CONSISTENCY VALIDATION')
    print('='*70)

    # Load all CSV files
    results_path = Path(results_dir)
    bookings = pd.read_csv(results_path / 'bookings.csv', keep_default_na=False)
    checkins = pd.read_csv(results_path / 'checkins.csv')
    checkouts = pd.read_csv(results_path / 'checkouts.csv', keep_default_na=False)
    occupancy = pd.read_csv(results_path / 'occupancy.csv', index_col='day')

    errors = []
    warnings = []

    print('\n1. DATA INTEGRITY CHECKS')
    print('-'*70)

    # Check 1: Request totals
    total_requests = len(bookings)
    accepted = bookings[bookings['accepted'] == True]
    rejected = bookings[bookings['accepted'] == False]
    print(f'✓ Total requests: {total_requests}')
    if total_requests > 0:
        print(f'  - Accepted: {len(accepted)} ({len(accepted)/total_requests*100:.1f}%)')
        print(f'  - Rejected: {len(rejected)} ({len(rejected)/total_requests*100:.1f}%)')
    if len(accepted) + len(rejected) != total_requests:
        error = f'Request sum mismatch: {len(accepted)} + {len(rejected)} != {total_requests}'
        print(f'  ✗ Sum check: FAIL - {error}')
        errors.append(error)

    # Check 2: Every arrival belongs to an accepted booking
    accepted_guests = set(accepted['guest_id'])
    unknown_checkins = set(checkins['guest_id']) - accepted_guests
    print(f'\n✓ Check-ins: {len(checkins)} records')
    if unknown_checkins:
        error = f'{len(unknown_checkins)} check-ins without an accepted booking'
        print(f'  ✗ {error}')
        errors.append(error)
    else:
        print(f'  ✓ All match accepted bookings')

    # Check 3: Every departure follows a successful arrival
    arrived_guests = set(checkins[checkins['success'] == True]['guest_id'])
    unknown_checkouts = set(checkouts['guest_id']) - arrived_guests
    print(f'\n✓ Check-outs: {len(checkouts)} records')
    if unknown_checkouts:
        error = f'{len(unknown_checkouts)} check-outs without a successful check-in'
        print(f'  ✗ {error}')
        errors.append(error)
    else:
        print(f'  ✓ All match successful check-ins')

    print('\n2. BUSINESS LOGIC CHECKS')
    print('-'*70)

    # Check 4: Accepted stays have a valid day range
    inverted = accepted[accepted['day_to'] < accepted['day_from']]
    print(f'✓ Accepted bookings with inverted range: {len(inverted)}')
    if len(inverted) > 0:
        error = f'Found {len(inverted)} accepted bookings ending before they start'
        print(f'  ✗ Status: FAIL - {error}')
        errors.append(error)

    # Check 5: Stays are booked ahead of arrival
    same_day = bookings[bookings['day_from'] <= bookings['day']]
    print(f'\n✓ Bookings arriving on or before the booking day: {len(same_day)}')
    if len(same_day) > 0:
        warning = f'Found {len(same_day)} bookings without lead time'
        print(f'  ⚠ {warning}')
        warnings.append(warning)

    # Check 6: No downgrades
    downgrades = 0
    for _, row in accepted.iterrows():
        if _rank(row['assigned_type']) < _rank(row['requested_type']):
            downgrades += 1
    upgrades = int(accepted['upgraded'].sum()) if total_requests else 0
    print(f'\n✓ Upgrades: {upgrades}, downgrades: {downgrades}')
    if downgrades > 0:
        error = f'Found {downgrades} bookings assigned a lower room type'
        print(f'  ✗ Status: FAIL - {error}')
        errors.append(error)

    # Check 7: Arrivals and departures happen on or after their due day
    early_checkins = checkins[checkins['day'] < checkins['day_from']]
    early_checkouts = checkouts[checkouts['day'] <= checkouts['day_to']]
    print(f'\n✓ Early check-ins: {len(early_checkins)}, early check-outs: {len(early_checkouts)}')
    if len(early_checkins) + len(early_checkouts) > 0:
        error = 'Found arrivals or departures processed before they were due'
        print(f'  ✗ Status: FAIL - {error}')
        errors.append(error)

    # Check 8: Billing depends only on the requested type
    prices = checkouts.groupby('requested_type')['cost'].nunique()
    inconsistent = prices[prices > 1]
    print(f'\n✓ Bills by requested type:')
    for room_type, cost in checkouts.groupby('requested_type')['cost'].first().items():
        print(f'  - {room_type}: {cost}')
    if len(inconsistent) > 0:
        warning = f'Room types billed at several prices: {", ".join(inconsistent.index)}'
        print(f'  ⚠ {warning}')
        warnings.append(warning)

    # Check 9: Occupancy stays within capacity
    print(f'\n✓ Occupancy:')
    print(f'  - Min: {occupancy.min().min():.1%}')
    print(f'  - Max: {occupancy.max().max():.1%}')
    print(f'  - Avg: {occupancy.mean().mean():.1%}')
    over_capacity = int((occupancy > 1.0).sum().sum())
    if over_capacity > 0:
        error = f'{over_capacity} room-type days exceed capacity'
        print(f'  ✗ {error}')
        errors.append(error)

    # Summary
    print('\n' + '='*70)
    print('VALIDATION SUMMARY')
    print('='*70)

    if len(errors) == 0 and len(warnings) == 0:
        print('✓ ALL CHECKS PASSED - Logic is correct!')
        return 0
    else:
        if len(errors) > 0:
            print(f'\n✗ ERRORS FOUND: {len(errors)}')
            for i, error in enumerate(errors, 1):
                print(f'  {i}. {error}')

        if len(warnings) > 0:
            print(f'\n⚠ WARNINGS: {len(warnings)}')
            for i, warning in enumerate(warnings, 1):
                print(f'  {i}. {warning}')

        return 1 if len(errors) > 0 else 0


if __name__ == '__main__':
    sys.exit(validate_simulation_logic(*sys.argv[1:2]))
