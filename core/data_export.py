"""
Data export module for simulation results.

This module provides CSV export functionality for:
- Booking requests (accepted and rejected)
- Check-in outcomes
- Check-outs and billed amounts
- Daily occupancy by room type
"""

import csv
from pathlib import Path
from typing import List, Dict, Any, Optional
import logging
import pandas as pd

from core.clock import Clock
from core.events import SimulationObserver
from core.models import Booking, Cost

logger = logging.getLogger(__name__)


class DataExporter(SimulationObserver):
    """
    Export simulation data to CSV files.

    Creates structured CSV files for analysis:
    - bookings.csv: All booking requests with outcome and assigned room type
    - checkins.csv: Arrival checks and their result
    - checkouts.csv: Departures and the amount billed
    - occupancy.csv: Daily busy fraction per room type
    """

    def __init__(self, output_dir: str = "simulation_results", clock: Optional[Clock] = None):
        """
        Initialize data exporter.

        Args:
            output_dir: Directory to save CSV files
            clock: Clock used to timestamp rows (optional)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.clock = clock

        # Data collectors
        self.booking_rows: List[Dict[str, Any]] = []
        self.checkin_rows: List[Dict[str, Any]] = []
        self.checkout_rows: List[Dict[str, Any]] = []
        self.occupancy: Optional[pd.DataFrame] = None

        logger.info(f"Data exporter initialized. Output directory: {self.output_dir}")

    def _timestamp(self) -> Dict[str, Any]:
        if self.clock is None:
            return {'day': '', 'hour': ''}
        now = self.clock.get_time()
        return {'day': now.day, 'hour': now.hour}

    def on_book(self, booking: Booking, success: bool) -> None:
        row = self._timestamp()
        row.update({
            'guest_id': booking.guest_id,
            'requested_type': str(booking.room_type),
            'assigned_type': str(booking.assigned_type) if booking.assigned_type else '',
            'day_from': booking.day_from,
            'day_to': booking.day_to,
            'nights': booking.nights,
            'accepted': success,
            'upgraded': booking.is_upgraded,
        })
        self.booking_rows.append(row)

    def on_checkin(self, booking: Booking, success: bool) -> None:
        row = self._timestamp()
        row.update({
            'guest_id': booking.guest_id,
            'requested_type': str(booking.room_type),
            'day_from': booking.day_from,
            'day_to': booking.day_to,
            'success': success,
        })
        self.checkin_rows.append(row)

    def on_checkout(self, booking: Booking, cost: Cost) -> None:
        row = self._timestamp()
        row.update({
            'guest_id': booking.guest_id,
            'requested_type': str(booking.room_type),
            'assigned_type': str(booking.assigned_type) if booking.assigned_type else '',
            'day_from': booking.day_from,
            'day_to': booking.day_to,
            'cost': cost,
        })
        self.checkout_rows.append(row)

    def set_occupancy(self, frame: pd.DataFrame) -> None:
        """Attach the daily occupancy table (day x room type)."""
        self.occupancy = frame

    def _write_rows(self, filename: str, header: List[str], rows: List[Dict[str, Any]]) -> str:
        filepath = self.output_dir / filename
        with open(filepath, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=header)
            writer.writeheader()
            writer.writerows(rows)
        logger.info(f"Exported {len(rows)} rows to {filepath}")
        return str(filepath)

    def export_bookings(self, filename: str = "bookings.csv") -> str:
        """
        Export all booking requests to CSV.

        Returns:
            Path to created file
        """
        header = ['day', 'hour', 'guest_id', 'requested_type', 'assigned_type',
                  'day_from', 'day_to', 'nights', 'accepted', 'upgraded']
        return self._write_rows(filename, header, self.booking_rows)

    def export_checkins(self, filename: str = "checkins.csv") -> str:
        """Export arrival checks to CSV."""
        header = ['day', 'hour', 'guest_id', 'requested_type', 'day_from', 'day_to', 'success']
        return self._write_rows(filename, header, self.checkin_rows)

    def export_checkouts(self, filename: str = "checkouts.csv") -> str:
        """Export departures to CSV."""
        header = ['day', 'hour', 'guest_id', 'requested_type', 'assigned_type',
                  'day_from', 'day_to', 'cost']
        return self._write_rows(filename, header, self.checkout_rows)

    def export_occupancy(self, filename: str = "occupancy.csv") -> Optional[str]:
        """Export daily occupancy to CSV (skipped when none was attached)."""
        if self.occupancy is None:
            logger.warning("No occupancy data to export")
            return None
        filepath = self.output_dir / filename
        self.occupancy.to_csv(filepath, float_format='%.4f')
        logger.info(f"Exported {len(self.occupancy)} days of occupancy to {filepath}")
        return str(filepath)

    def export_all(self) -> Dict[str, str]:
        """
        Export every collected table.

        Returns:
            Mapping of data type to file path
        """
        files = {
            'bookings': self.export_bookings(),
            'checkins': self.export_checkins(),
            'checkouts': self.export_checkouts(),
        }
        occupancy_path = self.export_occupancy()
        if occupancy_path:
            files['occupancy'] = occupancy_path
        return files
