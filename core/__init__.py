"""
core
----

Core care home engine components:

- entities:
  Immutable value objects (Staff, Shift, Bed, Resident, Prescription, ...) and the Role/Gender enums.

- CareHomeState:
  Encapsulate every registry the facade mutates: roster, shift ledger, beds,
  clinical records, archives and the audit trail.

- shift_rules & ConstraintManager:
  Define the per-role shift legality rules and apply them in a controlled sequence.
"""
