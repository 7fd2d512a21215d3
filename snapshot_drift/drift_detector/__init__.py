"""
Snapshot Drift Detector Package.

This package detects configuration drift between two exported snapshots of
cloud resource documents (virtual machines and their instance views and
extensions, network interfaces, public IPs, disks, virtual networks, subnets
and network security groups).

The drift detection process:
1. Loads each category of both snapshots into identity-keyed resource sets
2. Classifies keys as added, removed, changed or unchanged
3. Diffs every changed pair structurally (field paths) or by line position
4. Collects the category sections into one ordered report
"""

from .core import detect_drift
from .report import Report, format_report, report_to_dict

__all__ = ["detect_drift", "Report", "format_report", "report_to_dict"]
