compliance_description = """
Audit staffing compliance over every calendar date that has at least one shift in the ledger.

### Rules checked per date

- `NURSE_DAILY_CAP`: no nurse is scheduled more than 8 hours on the date.
- `NURSE_COVERAGE_MORNING`: at least one nurse holds the 08:00-16:00 window.
- `NURSE_COVERAGE_EVENING`: at least one nurse holds the 14:00-22:00 window.
- `DOCTOR_COVERAGE`: doctors are scheduled at least 1 hour in total on the date.

### Response

- `200`: every date passed. Returns `passed`, `datesChecked` and an empty `violations` list.
- `422`: at least one rule failed. `detail.violations` lists every failing `date` and `rule`
  with a human readable `detail`; the audit never stops at the first failure.

An empty ledger has no dates to check and passes.
"""
