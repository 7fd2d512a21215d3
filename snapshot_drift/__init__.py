"""
Snapshot Drift Detector.

Compares two exported snapshots of cloud resource configuration documents
and reports which resources were added, removed or changed between them.
"""
