"""
facility
--------

Main care home module. Components, leaves first:

- `roster`: staff records, roles, credentials and manager bootstrap.
- `shifts`: the shift ledger and its legality checks.
- `occupancy`: beds, room grouping and the same-room gender rule.
- `clinical`: prescriptions and administrations keyed by resident.
- `archive` / `audit`: frozen stays and the append-only action trail.
- `compliance`: staffing coverage audit over the whole ledger.
- `carehome`: the `CareHome` facade that locks, authorizes and orchestrates all of the above.
"""
from .carehome import CareHome
