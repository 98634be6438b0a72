"""
persistence
-----------

Snapshot collaborator: captures a CareHome as pandas DataFrames (optionally an
Excel workbook) and rebuilds one through the facade's raw_* restore primitives.
"""
