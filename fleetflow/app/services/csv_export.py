"""
CSV rendering for the fuel-efficiency and ROI reports.

Headers are written as plain text; in data rows every string field is
quoted and numbers are left bare.
"""

import csv
import io
from typing import Iterable, List, Sequence

from fleetflow.app.domain.fleet.rules import plain_number
from fleetflow.app.schemas.analytics import FuelEfficiencyRow, VehicleROIRow

FUEL_CSV_FILENAME = "fuel-efficiency-report.csv"
ROI_CSV_FILENAME = "vehicle-roi-report.csv"

FUEL_CSV_HEADER = [
    "Vehicle", "License Plate", "Type", "Total Distance (km)", "Total Liters",
    "Fuel Cost ($)", "Efficiency (km/L)", "Trips",
]
ROI_CSV_HEADER = [
    "Vehicle", "License Plate", "Type", "Acquisition Cost ($)", "Revenue ($)",
    "Fuel Cost ($)", "Maintenance Cost ($)", "Total Expenses ($)", "ROI (%)",
]


def render_csv(header: Sequence[str], rows: Iterable[List]) -> str:
    output = io.StringIO()
    output.write(",".join(header) + "\n")

    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in rows:
        writer.writerow([plain_number(value) for value in row])

    return output.getvalue()


def fuel_efficiency_csv(rows: List[FuelEfficiencyRow]) -> str:
    return render_csv(FUEL_CSV_HEADER, (
        [
            row.vehicle_name,
            row.license_plate,
            row.vehicle_type or "",
            row.total_distance,
            row.total_liters,
            row.total_fuel_cost,
            row.efficiency,
            row.trip_count,
        ]
        for row in rows
    ))


def vehicle_roi_csv(rows: List[VehicleROIRow]) -> str:
    return render_csv(ROI_CSV_HEADER, (
        [
            row.vehicle_name,
            row.license_plate,
            row.vehicle_type,
            row.acquisition_cost,
            row.total_revenue,
            row.total_fuel_cost,
            row.total_maintenance_cost,
            row.total_expenses,
            row.roi,
        ]
        for row in rows
    ))
